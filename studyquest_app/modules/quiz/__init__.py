# File: studyquest_app/modules/quiz/__init__.py
# Mục đích: Blueprint cho vòng đời phiên quiz thích ứng.

from flask import Blueprint

quiz_bp = Blueprint('quiz', __name__)

from . import routes  # noqa: E402,F401
