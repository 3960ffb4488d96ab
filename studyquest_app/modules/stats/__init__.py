# File: studyquest_app/modules/stats/__init__.py
# Mục đích: Blueprint cho module thống kê (tiến độ, bảng xếp hạng, dashboard).

from flask import Blueprint

stats_bp = Blueprint('stats', __name__)

from . import routes  # noqa: E402,F401
