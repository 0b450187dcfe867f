from marshmallow import fields, validate

from coachplan.extensions import ma
from coachplan.models.plan_block import BLOCK_POSITIONS, BLOCK_TYPES
from coachplan.models.plan_exercise import GROUP_KINDS


class PlanCreateSchema(ma.Schema):
    client_id = fields.Integer(required=True)
    week_start = fields.Date(load_default=None)
    day_of_week = fields.Integer(required=True, validate=validate.Range(min=0, max=6))
    name = fields.String(load_default=None, validate=validate.Length(max=150))
    notes = fields.String(load_default=None)


class PlanUpdateSchema(ma.Schema):
    name = fields.String(validate=validate.Length(max=150))
    notes = fields.String(allow_none=True)


class ApplyTemplateSchema(ma.Schema):
    client_id = fields.Integer(required=True)
    days = fields.List(fields.Integer(validate=validate.Range(min=0, max=6)), required=True,
                       validate=validate.Length(min=1))
    week_start = fields.Date(load_default=None)
    replace_existing = fields.Boolean(load_default=True)


class CopyWeekSchema(ma.Schema):
    client_id = fields.Integer(required=True)
    source_week = fields.Date(required=True)
    target_week = fields.Date(required=True)


class ExerciseSchema(ma.Schema):
    library_exercise_id = fields.Integer(load_default=None)
    name = fields.String(validate=validate.Length(min=1, max=150))
    video_url = fields.String(allow_none=True, validate=validate.Length(max=255))
    sets = fields.Integer(allow_none=True, validate=validate.Range(min=0))
    reps = fields.String(allow_none=True, validate=validate.Length(max=20))
    load = fields.String(allow_none=True, validate=validate.Length(max=30))
    rest_seconds = fields.Integer(allow_none=True, validate=validate.Range(min=0))
    notes = fields.String(allow_none=True)


class ExecutedLoadSchema(ma.Schema):
    executed_load = fields.String(required=True, allow_none=True, validate=validate.Length(max=30))


class GroupCreateSchema(ma.Schema):
    exercise_ids = fields.List(fields.Integer(), required=True, validate=validate.Length(min=1))
    kind = fields.String(required=True, validate=validate.OneOf(GROUP_KINDS))
    rest_seconds = fields.Integer(load_default=None, validate=validate.Range(min=0))


class GroupUpdateSchema(ma.Schema):
    kind = fields.String(validate=validate.OneOf(GROUP_KINDS))
    rest_seconds = fields.Integer(validate=validate.Range(min=0))


class UnitOrderSchema(ma.Schema):
    order = fields.List(fields.String(), required=True)


class BlockCreateSchema(ma.Schema):
    type = fields.String(required=True, validate=validate.OneOf(BLOCK_TYPES))
    position = fields.String(load_default="start", validate=validate.OneOf(BLOCK_POSITIONS))
    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    description = fields.String(load_default=None)
    estimated_minutes = fields.Integer(load_default=None, validate=validate.Range(min=0))
    required = fields.Boolean(load_default=False)
    config = fields.Dict(load_default=None)


class BlockUpdateSchema(ma.Schema):
    name = fields.String(validate=validate.Length(min=1, max=150))
    description = fields.String(allow_none=True)
    estimated_minutes = fields.Integer(allow_none=True, validate=validate.Range(min=0))
    required = fields.Boolean()
    config = fields.Dict(allow_none=True)


class BlockFromSourceSchema(ma.Schema):
    template_block_id = fields.Integer(load_default=None)
    preset_id = fields.String(load_default=None)
    position = fields.String(load_default=None, validate=validate.OneOf(BLOCK_POSITIONS))


class BlockOrderSchema(ma.Schema):
    position = fields.String(required=True, validate=validate.OneOf(BLOCK_POSITIONS))
    order = fields.List(fields.Integer(), required=True)


class CompletionSchema(ma.Schema):
    completed = fields.Boolean(required=True)


class ActiveWeekSchema(ma.Schema):
    client_id = fields.Integer(required=True)
    week_start = fields.Date(load_default=None)
    weeks = fields.Integer(load_default=None)


class ExerciseRefSchema(ma.Schema):
    exercise_id = fields.Integer(required=True)
