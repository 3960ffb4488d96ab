# File: studyquest_app/modules/content_generator/__init__.py
# Mục đích: Blueprint sinh câu hỏi và tóm tắt ghi chú bằng AI.

from flask import Blueprint

content_generator_bp = Blueprint('content_generator', __name__)

from . import routes  # noqa: E402,F401
