from flask import jsonify, request

from coachplan.services.library import search_library
from coachplan.utils.decorators import role_required
from . import trainer_bp


@trainer_bp.route("/library", methods=["GET"])
@role_required("trainer", "admin")
def library(current_user):
    items = search_library(
        query=request.args.get("q"),
        category=request.args.get("category"),
        limit=request.args.get("limit", 50, type=int),
    )
    return jsonify([e.to_dict() for e in items]), 200
