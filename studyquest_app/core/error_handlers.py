"""
Error Handlers for StudyQuest

Provides:
- Custom exception classes
- Consistent error response format
- Flask error handlers
- A route decorator that collapses server-side failures into a fixed message
"""

from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import current_app, jsonify, request

from ..db_instance import db


class StudyQuestError(Exception):
    """Base exception class for StudyQuest."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        payload = {
            'success': False,
            'message': self.message,
            'code': self.code,
        }
        if self.details:
            payload['details'] = self.details
        return payload


class NotFoundError(StudyQuestError):
    """Resource not found."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(StudyQuestError):
    """Input validation failed."""

    def __init__(self, message: str = 'Validation failed', errors: Dict = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


class UnauthorizedError(StudyQuestError):
    """Missing or invalid credentials."""

    def __init__(self, message: str = 'Authentication required'):
        super().__init__(
            message=message,
            code='UNAUTHORIZED',
            status_code=401
        )


class ConflictError(StudyQuestError):
    """Request conflicts with the current state of a resource."""

    def __init__(self, message: str = 'Conflict', code: str = 'CONFLICT', details: Dict = None):
        super().__init__(
            message=message,
            code=code,
            status_code=409,
            details=details
        )


class SessionClosedError(ConflictError):
    """Answer submitted to a quiz session that is no longer active."""

    def __init__(self, message: str = 'Quiz session is already completed', session_id: int = None):
        super().__init__(
            message=message,
            code='SESSION_CLOSED',
            details={'quiz_session_id': session_id} if session_id else None
        )


class UpstreamGenerationError(StudyQuestError):
    """The language model call failed or returned an unusable answer."""

    def __init__(self, message: str = 'AI generation failed', feature: str = None):
        super().__init__(
            message=message,
            code='UPSTREAM_GENERATION_FAILED',
            status_code=500,
            details={'feature': feature} if feature else None
        )


class PersistenceError(StudyQuestError):
    """A database write failed."""

    def __init__(self, message: str = 'Failed to persist data', entity: str = None):
        super().__init__(
            message=message,
            code='PERSISTENCE_FAILED',
            status_code=500,
            details={'entity': entity} if entity else None
        )


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """Create a standardized error response."""
    response = {
        'success': False,
        'message': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def handle_api_errors(failure_message: str) -> Callable:
    """
    Wrap an API route so that server-side failures never leak details.

    Client errors (status < 500) propagate to the registered error handler.
    Everything else is logged, the session is rolled back and the caller gets
    ``failure_message`` with a 500.
    """

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except StudyQuestError as error:
                if error.status_code < 500:
                    raise
                db.session.rollback()
                current_app.logger.error(
                    f"{request.path} failed with {error.code}: {error.message}"
                )
                return error_response(failure_message, 'SERVER_ERROR', 500)
            except Exception as error:
                db.session.rollback()
                current_app.logger.exception(
                    f"{request.path} failed with {type(error).__name__}: {error}"
                )
                return error_response(failure_message, 'SERVER_ERROR', 500)

        return wrapper

    return decorator


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(StudyQuestError)
    def handle_studyquest_error(error):
        if error.status_code >= 500:
            db.session.rollback()
            current_app.logger.error(f"{error.code}: {error.message}")
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        current_app.logger.info(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        if request.path.startswith('/api/') or request.path.startswith('/auth/api/'):
            return error_response('Endpoint not found', 'NOT_FOUND', 404)
        return error

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_response('Method not allowed', 'METHOD_NOT_ALLOWED', 405)

    @app.errorhandler(413)
    def handle_too_large(error):
        return error_response('Uploaded file is too large', 'PAYLOAD_TOO_LARGE', 413)

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        return error_response('Internal server error', 'SERVER_ERROR', 500)
