from flask import request


def load_json(schema, partial=False):
    """Validate the request body; marshmallow errors become 400 responses."""
    return schema.load(request.get_json(silent=True) or {}, partial=partial)
