from flask import Blueprint

trainer_bp = Blueprint('trainer', __name__)

from . import templates, plans, exercises, blocks, weeks, sessions, library
