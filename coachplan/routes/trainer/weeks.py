from flask import jsonify

from coachplan.errors import ValidationError
from coachplan.routes import load_json
from coachplan.schemas.plans import ActiveWeekSchema
from coachplan.services import weeks as week_service
from coachplan.utils.access import client_account
from coachplan.utils.decorators import role_required
from . import trainer_bp


@trainer_bp.route("/clients/<int:client_id>/active-week", methods=["GET"])
@role_required("trainer", "admin")
def get_active_week(client_id, current_user):
    client = client_account(client_id)
    start = week_service.get_active_week(client.id, current_user.id)
    return jsonify({"client_id": client.id, "week_start": start.isoformat()}), 200


@trainer_bp.route("/active-week", methods=["PUT"])
@role_required("trainer")
def set_active_week(current_user):
    """Point a client at a week, either by date or by moving ``weeks`` steps."""
    data = load_json(ActiveWeekSchema())
    client = client_account(data["client_id"])
    if (data["week_start"] is None) == (data["weeks"] is None):
        raise ValidationError("Provide exactly one of week_start or weeks")
    if data["week_start"] is not None:
        pointer = week_service.set_active_week(client.id, current_user.id, data["week_start"])
    else:
        pointer = week_service.advance_week(client.id, current_user.id, weeks=data["weeks"])
    return jsonify(pointer.to_dict()), 200
