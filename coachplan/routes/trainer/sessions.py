from flask import jsonify

from coachplan.services import sessions as session_service
from coachplan.utils.access import owned_plan, owned_session
from coachplan.utils.decorators import role_required
from . import trainer_bp


@trainer_bp.route("/plans/<int:plan_id>/sessions", methods=["GET"])
@role_required("trainer", "admin")
def list_sessions(plan_id, current_user):
    owned_plan(plan_id, current_user)
    items = session_service.list_sessions(plan_id)
    return jsonify([s.to_dict() for s in items]), 200


@trainer_bp.route("/sessions/<int:session_id>/summary", methods=["GET"])
@role_required("trainer", "admin")
def session_summary(session_id, current_user):
    owned_session(session_id, current_user)
    return jsonify(session_service.session_summary(session_id)), 200


@trainer_bp.route("/sessions/<int:session_id>/abandon", methods=["POST"])
@role_required("trainer", "admin")
def abandon_session(session_id, current_user):
    owned_session(session_id, current_user)
    session = session_service.abandon(session_id)
    return jsonify(session.to_dict()), 200
