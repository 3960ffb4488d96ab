"""Application factory for the StudyQuest app."""

from __future__ import annotations

from flask import Flask

from .config import Config
from .core.bootstrap import (
    configure_logging,
    initialize_database,
    register_auth_loaders,
    register_blueprints,
    register_error_handlers,
    register_event_handlers,
    register_extensions,
)
from .extensions import db

__all__ = ["create_app", "db"]


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure a Flask application instance."""

    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)
    register_extensions(app)
    register_auth_loaders(app)
    register_blueprints(app)
    register_event_handlers(app)
    register_error_handlers(app)

    with app.app_context():
        initialize_database(app)

    return app
