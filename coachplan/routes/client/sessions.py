from flask import current_app, jsonify

from coachplan.routes import load_json
from coachplan.schemas.sessions import RestStartSchema, SessionFinishSchema, SessionStartSchema
from coachplan.services import sessions as session_service
from coachplan.utils.access import owned_plan, owned_session
from coachplan.utils.decorators import role_required
from . import client_bp


@client_bp.route("/sessions", methods=["POST"])
@role_required("client")
def start_session(current_user):
    data = load_json(SessionStartSchema())
    plan = owned_plan(data["plan_id"], current_user)
    session = session_service.start(plan.id, current_user.id)
    return jsonify(session.to_dict()), 201


@client_bp.route("/plans/<int:plan_id>/active-session", methods=["GET"])
@role_required("client")
def active_session(plan_id, current_user):
    owned_plan(plan_id, current_user)
    session = session_service.get_active_session(plan_id, current_user.id)
    if session is None:
        return jsonify({"msg": "No active session"}), 404
    return jsonify(session.to_dict()), 200


@client_bp.route("/sessions/<int:session_id>/pause", methods=["POST"])
@role_required("client")
def pause_session(session_id, current_user):
    owned_session(session_id, current_user)
    return jsonify(session_service.pause(session_id).to_dict()), 200


@client_bp.route("/sessions/<int:session_id>/resume", methods=["POST"])
@role_required("client")
def resume_session(session_id, current_user):
    owned_session(session_id, current_user)
    return jsonify(session_service.resume(session_id).to_dict()), 200


@client_bp.route("/sessions/<int:session_id>/finish", methods=["POST"])
@role_required("client")
def finish_session(session_id, current_user):
    owned_session(session_id, current_user)
    data = load_json(SessionFinishSchema())
    session = session_service.finish(session_id, notes=data["notes"], complete_plan=data["complete_plan"])
    return jsonify(session.to_dict()), 200


@client_bp.route("/sessions/<int:session_id>/abandon", methods=["POST"])
@role_required("client")
def abandon_session(session_id, current_user):
    owned_session(session_id, current_user)
    return jsonify(session_service.abandon(session_id).to_dict()), 200


@client_bp.route("/sessions/<int:session_id>/rest/start", methods=["POST"])
@role_required("client")
def rest_start(session_id, current_user):
    owned_session(session_id, current_user)
    data = load_json(RestStartSchema())
    interval = session_service.log_rest_start(session_id, data["kind"])
    return jsonify(interval.to_dict()), 201


@client_bp.route("/sessions/<int:session_id>/rest/end", methods=["POST"])
@role_required("client")
def rest_end(session_id, current_user):
    owned_session(session_id, current_user)
    interval = session_service.log_rest_end(session_id)
    if interval is None:
        current_app.logger.info(f"Rest end on session {session_id} with no open rest")
        return jsonify({"msg": "No rest in progress"}), 200
    return jsonify(interval.to_dict()), 200


@client_bp.route("/sessions/<int:session_id>/summary", methods=["GET"])
@role_required("client")
def session_summary(session_id, current_user):
    owned_session(session_id, current_user)
    return jsonify(session_service.session_summary(session_id)), 200
