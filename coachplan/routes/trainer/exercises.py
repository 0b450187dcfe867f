from flask import jsonify

from coachplan.routes import load_json
from coachplan.schemas.plans import (
    ExerciseRefSchema, ExerciseSchema, GroupCreateSchema, GroupUpdateSchema, UnitOrderSchema,
)
from coachplan.services import grouping
from coachplan.services import plans as plan_service
from coachplan.utils.access import owned_exercise, owned_group, owned_plan
from coachplan.utils.decorators import role_required
from . import trainer_bp


@trainer_bp.route("/plans/<int:plan_id>/exercises", methods=["POST"])
@role_required("trainer", "admin")
def add_exercise(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(ExerciseSchema())
    exercise = plan_service.add_exercise(plan_id, **data)
    return jsonify(exercise.to_dict()), 201


@trainer_bp.route("/exercises/<int:exercise_id>", methods=["PATCH"])
@role_required("trainer", "admin")
def update_exercise(exercise_id, current_user):
    owned_exercise(exercise_id, current_user)
    data = load_json(ExerciseSchema(), partial=True)
    exercise = plan_service.update_exercise(exercise_id, **data)
    return jsonify(exercise.to_dict()), 200


@trainer_bp.route("/exercises/<int:exercise_id>", methods=["DELETE"])
@role_required("trainer", "admin")
def delete_exercise(exercise_id, current_user):
    owned_exercise(exercise_id, current_user)
    plan_service.soft_delete_exercise(exercise_id)
    return jsonify({"msg": "Exercise deleted"}), 200


@trainer_bp.route("/exercises/<int:exercise_id>/restore", methods=["POST"])
@role_required("trainer", "admin")
def restore_exercise(exercise_id, current_user):
    owned_exercise(exercise_id, current_user)
    exercise = plan_service.restore_exercise(exercise_id)
    return jsonify(exercise.to_dict()), 200


@trainer_bp.route("/plans/<int:plan_id>/units", methods=["GET"])
@role_required("trainer", "admin")
def list_units(plan_id, current_user):
    owned_plan(plan_id, current_user)
    return jsonify([u.to_dict() for u in grouping.materialize(plan_id)]), 200


@trainer_bp.route("/plans/<int:plan_id>/units/order", methods=["PUT"])
@role_required("trainer", "admin")
def reorder_units(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(UnitOrderSchema())
    units = grouping.reorder_exercises(plan_id, data["order"])
    return jsonify([u.to_dict() for u in units]), 200


@trainer_bp.route("/plans/<int:plan_id>/groups", methods=["POST"])
@role_required("trainer", "admin")
def create_group(plan_id, current_user):
    owned_plan(plan_id, current_user)
    data = load_json(GroupCreateSchema())
    unit = grouping.create_group(plan_id, data["exercise_ids"], data["kind"], data["rest_seconds"])
    return jsonify(unit.to_dict()), 201


@trainer_bp.route("/groups/<group_id>", methods=["PATCH"])
@role_required("trainer", "admin")
def update_group(group_id, current_user):
    owned_group(group_id, current_user)
    data = load_json(GroupUpdateSchema(), partial=True)
    unit = grouping.update_group(group_id, **data)
    return jsonify(unit.to_dict()), 200


@trainer_bp.route("/groups/<group_id>", methods=["DELETE"])
@role_required("trainer", "admin")
def dissolve_group(group_id, current_user):
    if grouping.group_members(group_id):
        owned_group(group_id, current_user)
    released = grouping.dissolve_group(group_id)
    return jsonify({"msg": "Group dissolved", "released": released}), 200


@trainer_bp.route("/groups/<group_id>/exercises", methods=["POST"])
@role_required("trainer", "admin")
def add_to_group(group_id, current_user):
    owned_group(group_id, current_user)
    data = load_json(ExerciseRefSchema())
    owned_exercise(data["exercise_id"], current_user)
    unit = grouping.add_to_group(group_id, data["exercise_id"])
    return jsonify(unit.to_dict()), 200


@trainer_bp.route("/exercises/<int:exercise_id>/group", methods=["DELETE"])
@role_required("trainer", "admin")
def remove_from_group(exercise_id, current_user):
    owned_exercise(exercise_id, current_user)
    exercise = grouping.remove_from_group(exercise_id)
    return jsonify(exercise.to_dict()), 200
