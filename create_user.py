"""Create a user and print a bearer token for it.

Sign-in is handled outside this service, so this is how development
accounts get a token:  python create_user.py trainer coach@example.com "Coach Name"
"""
import sys
from datetime import timedelta

from flask_jwt_extended import create_access_token

from coachplan import create_app
from coachplan.extensions import db
from coachplan.models.user import ROLES, User

app = create_app()

with app.app_context():
    if len(sys.argv) < 4 or sys.argv[1] not in ROLES:
        sys.exit(f"usage: create_user.py {{{','.join(ROLES)}}} EMAIL NAME")
    role, email, name = sys.argv[1], sys.argv[2], sys.argv[3]

    user = User.query.filter_by(email=email).first()
    if user:
        print(f"User with email '{email}' already exists ({user.role}).")
    else:
        user = User(email=email, name=name, role=role, is_active=True)
        db.session.add(user)
        db.session.commit()
        print(f"{role.capitalize()} created with id {user.id}")

    token = create_access_token(identity=str(user.id), expires_delta=timedelta(days=30))
    print(f"Bearer {token}")
