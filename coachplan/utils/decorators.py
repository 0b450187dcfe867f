from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from coachplan.extensions import db
from coachplan.models import User


def role_required(*roles):
    """Require a valid JWT for an active user in one of ``roles``.

    The loaded user is passed to the view as ``current_user``.
    """
    def decorator(view_func):
        @wraps(view_func)
        @jwt_required()
        def wrapper(*args, **kwargs):
            user = db.session.get(User, int(get_jwt_identity()))
            if user is None or not user.is_active:
                return jsonify({"msg": "User not found"}), 401
            if roles and user.role not in roles:
                return jsonify({"msg": "Unauthorized"}), 403
            kwargs["current_user"] = user
            return view_func(*args, **kwargs)
        return wrapper
    return decorator
