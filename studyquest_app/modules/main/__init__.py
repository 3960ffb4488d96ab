# Tệp: studyquest_app/modules/main/__init__.py
# Mục đích: Blueprint cho các endpoint chung (health check).

from flask import Blueprint

main_bp = Blueprint('main', __name__)

from . import routes  # noqa: E402,F401
