from flask import jsonify, request

from coachplan.errors import ValidationError
from coachplan.models import TemplateBlock
from coachplan.routes import load_json
from coachplan.schemas.plans import (
    BlockCreateSchema, BlockFromSourceSchema, BlockOrderSchema, BlockUpdateSchema, CompletionSchema,
)
from coachplan.services import block_presets
from coachplan.services import blocks as block_service
from coachplan.services.common import get_or_404
from coachplan.utils.access import owned_block, owned_plan, owned_template
from coachplan.utils.decorators import role_required
from . import trainer_bp


def _organized_payload(plan_id):
    organized = block_service.list_organized(plan_id)
    return {
        "start": [block_service.describe(b) for b in organized["start"]],
        "end": [block_service.describe(b) for b in organized["end"]],
        "summary": organized["summary"],
    }


@trainer_bp.route("/block-presets", methods=["GET"])
@role_required("trainer", "admin")
def list_presets(current_user):
    presets = block_presets.list_presets(
        block_type=request.args.get("type"),
        popular_only=request.args.get("popular", "").lower() in ("1", "true"),
    )
    return jsonify(presets), 200


@trainer_bp.route("/plans/<int:plan_id>/blocks", methods=["GET"])
@role_required("trainer", "admin")
def list_blocks(plan_id, current_user):
    owned_plan(plan_id, current_user)
    return jsonify(_organized_payload(plan_id)), 200


@trainer_bp.route("/plans/<int:plan_id>/blocks", methods=["POST"])
@role_required("trainer", "admin")
def create_block(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(BlockCreateSchema())
    block = block_service.create_block(plan_id, **data)
    return jsonify(block_service.describe(block)), 201


@trainer_bp.route("/plans/<int:plan_id>/blocks/from-source", methods=["POST"])
@role_required("trainer", "admin")
def add_block_from_source(plan_id, current_user):
    """Copy a template block or a built-in preset into the plan."""
    owned_plan(plan_id, current_user)
    data = load_json(BlockFromSourceSchema())
    if (data["template_block_id"] is None) == (data["preset_id"] is None):
        raise ValidationError("Provide exactly one of template_block_id or preset_id")
    if data["template_block_id"] is not None:
        source = get_or_404(TemplateBlock, data["template_block_id"], "Template block")
        owned_template(source.template_id, current_user)
        block = block_service.instantiate_from_template(plan_id, source.id, data["position"])
    else:
        block = block_service.instantiate_preset(plan_id, data["preset_id"], data["position"] or "start")
    return jsonify(block_service.describe(block)), 201


@trainer_bp.route("/blocks/<int:block_id>", methods=["PATCH"])
@role_required("trainer", "admin")
def update_block(block_id, current_user):
    owned_block(block_id, current_user)
    data = load_json(BlockUpdateSchema(), partial=True)
    block = block_service.update_block(block_id, **data)
    return jsonify(block_service.describe(block)), 200


@trainer_bp.route("/plans/<int:plan_id>/blocks/order", methods=["PUT"])
@role_required("trainer", "admin")
def reorder_blocks(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(BlockOrderSchema())
    block_service.reorder(plan_id, data["position"], data["order"])
    return jsonify(_organized_payload(plan_id)), 200


@trainer_bp.route("/blocks/<int:block_id>/completed", methods=["PUT"])
@role_required("trainer", "admin")
def mark_block_completed(block_id, current_user):
    owned_block(block_id, current_user)
    data = load_json(CompletionSchema())
    block = block_service.mark_completed(block_id, data["completed"])
    return jsonify(block_service.describe(block)), 200


@trainer_bp.route("/blocks/<int:block_id>", methods=["DELETE"])
@role_required("trainer", "admin")
def delete_block(block_id, current_user):
    owned_block(block_id, current_user)
    block_service.soft_delete(block_id)
    return jsonify({"msg": "Block deleted"}), 200


@trainer_bp.route("/blocks/<int:block_id>/restore", methods=["POST"])
@role_required("trainer", "admin")
def restore_block(block_id, current_user):
    owned_block(block_id, current_user)
    block = block_service.restore(block_id)
    return jsonify(block_service.describe(block)), 200
