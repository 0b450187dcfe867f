from flask import jsonify, request

from coachplan.routes import load_json
from coachplan.schemas.templates import (
    FolderSchema, SavePlanAsTemplateSchema, TemplateBlockSchema,
    TemplateExerciseSchema, TemplateSchema, TemplateUpdateSchema,
)
from coachplan.services import templates as template_service
from coachplan.utils.access import owned_folder, owned_plan, owned_template
from coachplan.utils.decorators import role_required
from . import trainer_bp


@trainer_bp.route("/folders", methods=["GET"])
@role_required("trainer", "admin")
def list_folders(current_user):
    folders = template_service.list_folders(current_user.id)
    return jsonify([f.to_dict() for f in folders]), 200


@trainer_bp.route("/folders", methods=["POST"])
@role_required("trainer")
def create_folder(current_user):
    data = load_json(FolderSchema())
    folder = template_service.create_folder(current_user.id, data["name"], data["parent_id"])
    return jsonify(folder.to_dict()), 201


@trainer_bp.route("/templates", methods=["GET"])
@role_required("trainer", "admin")
def list_templates(current_user):
    folder_id = request.args.get("folder_id", type=int)
    if folder_id is not None:
        owned_folder(folder_id, current_user)
    items = template_service.list_templates(
        current_user.id, folder_id=folder_id, category=request.args.get("category"),
    )
    return jsonify([t.to_dict() for t in items]), 200


@trainer_bp.route("/templates", methods=["POST"])
@role_required("trainer")
def create_template(current_user):
    data = load_json(TemplateSchema())
    template = template_service.create_template(current_user.id, **data)
    return jsonify(template.to_dict()), 201


@trainer_bp.route("/templates/from-plan", methods=["POST"])
@role_required("trainer")
def save_plan_as_template(current_user):
    data = load_json(SavePlanAsTemplateSchema())
    plan = owned_plan(data.pop("plan_id"), current_user)
    template = template_service.save_plan_as_template(plan.id, current_user.id, **data)
    return jsonify(template.to_dict(include_children=True)), 201


@trainer_bp.route("/templates/<int:template_id>", methods=["GET"])
@role_required("trainer", "admin")
def get_template(template_id, current_user):
    template = owned_template(template_id, current_user)
    return jsonify(template.to_dict(include_children=True)), 200


@trainer_bp.route("/templates/<int:template_id>", methods=["PATCH"])
@role_required("trainer", "admin")
def update_template(template_id, current_user):
    owned_template(template_id, current_user)
    data = load_json(TemplateUpdateSchema(), partial=True)
    if data.get("folder_id") is not None:
        owned_folder(data["folder_id"], current_user)
    template = template_service.update_template(template_id, **data)
    return jsonify(template.to_dict()), 200


@trainer_bp.route("/templates/<int:template_id>", methods=["DELETE"])
@role_required("trainer", "admin")
def delete_template(template_id, current_user):
    owned_template(template_id, current_user)
    template_service.delete_template(template_id)
    return jsonify({"msg": "Template deleted"}), 200


@trainer_bp.route("/templates/<int:template_id>/blocks", methods=["POST"])
@role_required("trainer", "admin")
def add_template_block(template_id, current_user):
    owned_template(template_id, current_user)
    data = load_json(TemplateBlockSchema())
    block = template_service.add_template_block(template_id, **data)
    return jsonify(block.to_dict()), 201


@trainer_bp.route("/templates/<int:template_id>/exercises", methods=["POST"])
@role_required("trainer", "admin")
def add_template_exercise(template_id, current_user):
    owned_template(template_id, current_user)
    data = load_json(TemplateExerciseSchema())
    exercise = template_service.add_template_exercise(template_id, **data)
    return jsonify(exercise.to_dict()), 201
