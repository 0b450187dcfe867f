from marshmallow import fields, validate

from coachplan.extensions import ma
from coachplan.models.plan_block import BLOCK_POSITIONS, BLOCK_TYPES


class FolderSchema(ma.Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    parent_id = fields.Integer(load_default=None)


class TemplateSchema(ma.Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    description = fields.String(load_default=None)
    category = fields.String(load_default=None, validate=validate.Length(max=50))
    folder_id = fields.Integer(load_default=None)


class TemplateUpdateSchema(ma.Schema):
    name = fields.String(validate=validate.Length(min=1, max=150))
    description = fields.String(allow_none=True)
    category = fields.String(allow_none=True, validate=validate.Length(max=50))
    folder_id = fields.Integer(allow_none=True)


class TemplateBlockSchema(ma.Schema):
    type = fields.String(required=True, validate=validate.OneOf(BLOCK_TYPES))
    position = fields.String(load_default="start", validate=validate.OneOf(BLOCK_POSITIONS))
    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    description = fields.String(load_default=None)
    estimated_minutes = fields.Integer(load_default=None, validate=validate.Range(min=0))
    config = fields.Dict(load_default=None)


class TemplateExerciseSchema(ma.Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    library_exercise_id = fields.Integer(load_default=None)
    video_url = fields.String(load_default=None)
    sets = fields.Integer(load_default=None, validate=validate.Range(min=0))
    reps = fields.String(load_default=None)
    load = fields.String(load_default=None)
    rest_seconds = fields.Integer(load_default=0, validate=validate.Range(min=0))
    notes = fields.String(load_default=None)


class SavePlanAsTemplateSchema(TemplateSchema):
    plan_id = fields.Integer(required=True)
