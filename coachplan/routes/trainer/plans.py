from flask import current_app, jsonify, request

from coachplan.errors import ValidationError
from coachplan.routes import load_json
from coachplan.schemas.plans import (
    ApplyTemplateSchema, CompletionSchema, CopyWeekSchema, PlanCreateSchema, PlanUpdateSchema,
)
from coachplan.services import plans as plan_service
from coachplan.services import weeks as week_service
from coachplan.utils.access import client_account, owned_plan, owned_template
from coachplan.utils.dates import parse_date
from coachplan.utils.decorators import role_required
from . import trainer_bp


def _week_payload(days):
    return {str(day): [p.to_dict() for p in plans] for day, plans in sorted(days.items())}


@trainer_bp.route("/plans", methods=["POST"])
@role_required("trainer")
def create_plan(current_user):
    data = load_json(PlanCreateSchema())
    client = client_account(data["client_id"])
    start = data["week_start"] or week_service.get_active_week(client.id, current_user.id)
    plan = plan_service.create_plan(
        client.id, current_user.id, start, data["day_of_week"],
        name=data["name"], notes=data["notes"],
    )
    return jsonify(plan.to_dict()), 201


@trainer_bp.route("/clients/<int:client_id>/week", methods=["GET"])
@role_required("trainer", "admin")
def client_week(client_id, current_user):
    client = client_account(client_id)
    raw = request.args.get("week_start")
    try:
        start = parse_date(raw) if raw else week_service.get_active_week(client.id, current_user.id)
    except ValueError:
        raise ValidationError("week_start must be a date in YYYY-MM-DD format")
    days = plan_service.list_week(client.id, start, trainer_id=current_user.id)
    return jsonify({"week_start": start.isoformat(), "days": _week_payload(days)}), 200


@trainer_bp.route("/plans/<int:plan_id>", methods=["GET"])
@role_required("trainer", "admin")
def plan_detail(plan_id, current_user):
    owned_plan(plan_id, current_user)
    return jsonify(plan_service.plan_detail(plan_id)), 200


@trainer_bp.route("/plans/<int:plan_id>", methods=["PATCH"])
@role_required("trainer", "admin")
def update_plan(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(PlanUpdateSchema(), partial=True)
    plan = plan_service.update_plan(plan_id, **data)
    return jsonify(plan.to_dict()), 200


@trainer_bp.route("/plans/<int:plan_id>", methods=["DELETE"])
@role_required("trainer", "admin")
def delete_plan(plan_id, current_user):
    owned_plan(plan_id, current_user)
    plan_service.delete_plan(plan_id)
    return jsonify({"msg": "Plan deleted"}), 200


@trainer_bp.route("/plans/<int:plan_id>/completed", methods=["PUT"])
@role_required("trainer", "admin")
def set_plan_completed(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(CompletionSchema())
    plan = plan_service.set_plan_completed(plan_id, data["completed"])
    return jsonify(plan.to_dict()), 200


@trainer_bp.route("/templates/<int:template_id>/apply", methods=["POST"])
@role_required("trainer")
def apply_template(template_id, current_user):
    owned_template(template_id, current_user)
    data = load_json(ApplyTemplateSchema())
    client = client_account(data["client_id"])
    plans = plan_service.apply_template(
        template_id, client.id, current_user.id, data["days"],
        week_start=data["week_start"], replace_existing=data["replace_existing"],
    )
    current_app.logger.info(f"Trainer {current_user.id} applied template {template_id} to client {client.id}")
    return jsonify([p.to_dict() for p in plans]), 201


@trainer_bp.route("/weeks/copy", methods=["POST"])
@role_required("trainer")
def copy_week(current_user):
    data = load_json(CopyWeekSchema())
    client = client_account(data["client_id"])
    plans = plan_service.copy_week(client.id, current_user.id, data["source_week"], data["target_week"])
    return jsonify([p.to_dict() for p in plans]), 201
