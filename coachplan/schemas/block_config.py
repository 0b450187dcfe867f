"""Typed configuration payloads for plan blocks, keyed by block type."""
from marshmallow import fields, validate, validates_schema, ValidationError

from coachplan.extensions import ma

CARDIO_EQUIPMENT = (
    "treadmill", "bike", "rower", "airbike", "elliptical",
    "stairs", "jump_rope", "free_run", "other",
)
CARDIO_MODALITIES = ("continuous", "hiit", "interval")
INTENSITY_UNITS = ("rpm", "bpm", "speed", "watts", "percent")


class IntensitySchema(ma.Schema):
    value = fields.Float(required=True)
    unit = fields.String(required=True, validate=validate.OneOf(INTENSITY_UNITS))


class HeartRateTargetSchema(ma.Schema):
    min = fields.Integer(required=True, validate=validate.Range(min=30, max=250))
    max = fields.Integer(required=True, validate=validate.Range(min=30, max=250))

    @validates_schema
    def check_range(self, data, **kwargs):
        if data["min"] > data["max"]:
            raise ValidationError("min must not exceed max", "min")


class WarmupConfigSchema(ma.Schema):
    duration_minutes = fields.Integer(required=True, validate=validate.Range(min=0))
    style = fields.String(load_default="general", validate=validate.OneOf(("general", "specific")))
    activities = fields.List(fields.String(), load_default=list)
    notes = fields.String(allow_none=True)


class CardioConfigSchema(ma.Schema):
    equipment = fields.String(required=True, validate=validate.OneOf(CARDIO_EQUIPMENT))
    modality = fields.String(required=True, validate=validate.OneOf(CARDIO_MODALITIES))
    duration_minutes = fields.Integer(required=True, validate=validate.Range(min=0))
    intensity = fields.Nested(IntensitySchema, allow_none=True)
    work_seconds = fields.Integer(allow_none=True, validate=validate.Range(min=1))
    rest_seconds = fields.Integer(allow_none=True, validate=validate.Range(min=0))
    rounds = fields.Integer(allow_none=True, validate=validate.Range(min=1))
    speed_kmh = fields.Float(allow_none=True, validate=validate.Range(min=0))
    incline_percent = fields.Float(allow_none=True)
    resistance = fields.Integer(allow_none=True)
    heart_rate_target = fields.Nested(HeartRateTargetSchema, allow_none=True)

    @validates_schema
    def check_intervals(self, data, **kwargs):
        if data.get("modality") in ("hiit", "interval"):
            missing = [k for k in ("work_seconds", "rest_seconds", "rounds") if data.get(k) is None]
            if missing:
                raise ValidationError(
                    {k: ["Required for interval work."] for k in missing}
                )


class StretchConfigSchema(ma.Schema):
    muscle_groups = fields.List(fields.String(), load_default=list)
    duration_minutes = fields.Integer(required=True, validate=validate.Range(min=0))
    style = fields.String(load_default="static", validate=validate.OneOf(("static", "dynamic", "mixed")))
    notes = fields.String(allow_none=True)


class OtherConfigSchema(ma.Schema):
    payload = fields.Dict(keys=fields.String())


CONFIG_SCHEMAS = {
    "warmup": WarmupConfigSchema(),
    "cardio": CardioConfigSchema(),
    "stretch": StretchConfigSchema(),
}


def load_block_config(block_type, payload):
    """Validate ``payload`` against the schema for ``block_type``.

    ``other`` blocks take any mapping. Raises marshmallow's
    ``ValidationError`` on a bad payload.
    """
    if payload is None:
        return None
    if block_type == "other":
        return OtherConfigSchema().load({"payload": payload})["payload"]
    return CONFIG_SCHEMAS[block_type].load(payload)


def format_cardio_intensity(config):
    if not config:
        return ""
    if config.get("modality") in ("hiit", "interval"):
        return f"{config.get('work_seconds')}s on / {config.get('rest_seconds')}s off x {config.get('rounds')}"
    intensity = config.get("intensity")
    if intensity:
        units = {"rpm": "RPM", "bpm": "BPM", "speed": "km/h", "watts": "W", "percent": "%"}
        return f"{intensity['value']:g}{units[intensity['unit']]}"
    target = config.get("heart_rate_target")
    if target:
        return f"{target['min']}-{target['max']} BPM"
    return "moderate"
