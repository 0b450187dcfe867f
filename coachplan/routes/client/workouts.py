from flask import jsonify, request

from coachplan.errors import ValidationError
from coachplan.routes import load_json
from coachplan.schemas.plans import CompletionSchema, ExecutedLoadSchema
from coachplan.services import blocks as block_service
from coachplan.services import plans as plan_service
from coachplan.services import sessions as session_service
from coachplan.services import weeks as week_service
from coachplan.utils.access import owned_block, owned_exercise, owned_plan
from coachplan.utils.dates import parse_date
from coachplan.utils.decorators import role_required
from . import client_bp


@client_bp.route("/week", methods=["GET"])
@role_required("client")
def my_week(current_user):
    raw = request.args.get("week_start")
    try:
        start = parse_date(raw) if raw else week_service.get_active_week(current_user.id)
    except ValueError:
        raise ValidationError("week_start must be a date in YYYY-MM-DD format")
    days = plan_service.list_week(current_user.id, start)
    return jsonify({
        "week_start": start.isoformat(),
        "days": {str(day): [p.to_dict() for p in plans] for day, plans in sorted(days.items())},
    }), 200


@client_bp.route("/plans/<int:plan_id>", methods=["GET"])
@role_required("client")
def plan_detail(plan_id, current_user):
    owned_plan(plan_id, current_user)
    detail = plan_service.plan_detail(plan_id)
    active = session_service.get_active_session(plan_id, current_user.id)
    detail["active_session"] = active.to_dict() if active else None
    return jsonify(detail), 200


@client_bp.route("/exercises/<int:exercise_id>/completed", methods=["PUT"])
@role_required("client")
def mark_exercise_completed(exercise_id, current_user):
    owned_exercise(exercise_id, current_user)
    data = load_json(CompletionSchema())
    exercise = session_service.mark_exercise_completed(exercise_id, data["completed"])
    return jsonify(exercise.to_dict()), 200


@client_bp.route("/exercises/<int:exercise_id>/executed-load", methods=["PUT"])
@role_required("client")
def record_executed_load(exercise_id, current_user):
    owned_exercise(exercise_id, current_user)
    data = load_json(ExecutedLoadSchema())
    exercise = plan_service.record_executed_load(exercise_id, data["executed_load"])
    return jsonify(exercise.to_dict()), 200


@client_bp.route("/blocks/<int:block_id>/completed", methods=["PUT"])
@role_required("client")
def mark_block_completed(block_id, current_user):
    owned_block(block_id, current_user)
    data = load_json(CompletionSchema())
    block = block_service.mark_completed(block_id, data["completed"])
    return jsonify(block_service.describe(block)), 200


@client_bp.route("/active-week", methods=["GET"])
@role_required("client")
def my_active_week(current_user):
    start = week_service.get_active_week(current_user.id)
    return jsonify({"client_id": current_user.id, "week_start": start.isoformat()}), 200
