"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

from flask import Flask

from ..extensions import db, login_manager, migrate
from .error_handlers import error_response, register_error_handlers
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Route ``app.logger`` to the console and the rotating log file."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        log_to_file=app.config.get("LOG_TO_FILE", True),
    )


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)


def register_auth_loaders(app: Flask) -> None:
    """Resolve the caller from the session cookie or a bearer token."""

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(request):
        from ..modules.auth.services import AuthService

        header = request.headers.get("Authorization", "")
        if not header.lower().startswith("bearer "):
            return None
        return AuthService.resolve_token(header[7:].strip())

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response("Authentication required", "UNAUTHORIZED", 401)


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def register_event_handlers(app: Flask) -> None:
    """Import signal subscribers so that they connect to their signals."""

    from ..modules.gamification import events as gamification_events  # noqa: F401
    from ..modules.stats import events as stats_events  # noqa: F401

    app.logger.debug("Event handlers connected.")


def initialize_database(app: Flask) -> None:
    """Create database tables and ensure the default data exists."""

    from ..models import Achievement
    from .achievement_seeds import DEFAULT_ACHIEVEMENTS

    db.create_all()

    existing_keys = {row.key for row in Achievement.query.with_entities(Achievement.key).all()}
    created = 0
    for seed in DEFAULT_ACHIEVEMENTS:
        if seed["key"] in existing_keys:
            continue
        db.session.add(Achievement(**seed))
        created += 1
    db.session.commit()

    if created:
        app.logger.info("Đã tạo %s thành tích mặc định.", created)


__all__ = [
    "configure_logging",
    "register_extensions",
    "register_auth_loaders",
    "register_blueprints",
    "register_event_handlers",
    "register_error_handlers",
    "initialize_database",
]
