from flask import Blueprint

gamification_bp = Blueprint('gamification', __name__)

from . import routes  # noqa: E402,F401
