from marshmallow import fields, validate

from coachplan.extensions import ma
from coachplan.models.rest_interval import REST_KINDS


class SessionStartSchema(ma.Schema):
    plan_id = fields.Integer(required=True)


class SessionFinishSchema(ma.Schema):
    notes = fields.String(load_default=None)
    complete_plan = fields.Boolean(load_default=False)


class RestStartSchema(ma.Schema):
    kind = fields.String(load_default="between_sets", validate=validate.OneOf(REST_KINDS))
