"""Application-wide extensions.

Extension instances live here so blueprints, services and models can import
them without creating circular imports through the application factory.
"""

from flask_login import LoginManager
from flask_migrate import Migrate

from .db_instance import db

login_manager = LoginManager()
# JSON API only: unauthenticated requests get a 401 body instead of a redirect.
login_manager.login_view = None
login_manager.session_protection = "basic"

migrate = Migrate()

__all__ = ["db", "login_manager", "migrate"]
