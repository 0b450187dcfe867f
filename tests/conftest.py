from datetime import date, datetime

import pytest
from flask_jwt_extended import create_access_token

from coachplan import create_app
from coachplan.extensions import db
from coachplan.models import User
from coachplan.services import plans

MONDAY = date(2026, 10, 12)
T0 = datetime(2026, 10, 12, 8, 0, 0)


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def http(app):
    return app.test_client()


def _user(email, name, role):
    user = User(email=email, name=name, role=role, is_active=True)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def trainer(app):
    return _user("coach@example.com", "Coach", "trainer")


@pytest.fixture
def admin(app):
    return _user("admin@example.com", "Admin", "admin")


@pytest.fixture
def athlete(app):
    return _user("athlete@example.com", "Athlete", "client")


@pytest.fixture
def other_athlete(app):
    return _user("other@example.com", "Other Athlete", "client")


@pytest.fixture
def auth_headers(app):
    def headers(user):
        return {"Authorization": f"Bearer {create_access_token(identity=str(user.id))}"}
    return headers


@pytest.fixture
def plan(trainer, athlete):
    return plans.create_plan(athlete.id, trainer.id, MONDAY, 0, name="Leg day")


@pytest.fixture
def add_exercises(plan):
    def add(*names, plan_id=None):
        return [plans.add_exercise(plan_id or plan.id, name=n, sets=3, reps="10") for n in names]
    return add


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def t0():
    return T0
