"""
Auth Service - Core authentication logic.

Handles user registration, credential checks and the signed bearer tokens
accepted by the API alongside the Flask-Login session cookie.
"""
from typing import Optional

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from studyquest_app.core.error_handlers import ConflictError
from studyquest_app.core.signals import user_registered
from studyquest_app.models import db, User

TOKEN_SALT = 'studyquest-api-token'


def get_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def generate_token(user: User) -> str:
        return get_serializer().dumps(user.user_id)

    @staticmethod
    def resolve_token(token: str) -> Optional[User]:
        """Return the user a bearer token was issued for, or None if it is invalid or expired."""
        if not token:
            return None
        max_age = current_app.config.get('AUTH_TOKEN_MAX_AGE')
        try:
            user_id = get_serializer().loads(token, max_age=max_age)
        except SignatureExpired:
            current_app.logger.info("AuthService: bearer token đã hết hạn.")
            return None
        except BadSignature:
            return None
        if not isinstance(user_id, int):
            return None
        return db.session.get(User, user_id)

    @staticmethod
    def register_user(username: str, email: str, password: str, display_name: str = None) -> User:
        """
        Register a new user and emit ``user_registered``.

        Raises:
            ConflictError: username or email already taken.
        """
        email = email.strip().lower()
        taken = User.query.filter(or_(User.username == username, User.email == email)).first()
        if taken:
            raise ConflictError('Username or email already registered', code='USER_EXISTS')

        user = User(username=username, email=email, display_name=display_name)
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise ConflictError('Username or email already registered', code='USER_EXISTS') from e

        current_app.logger.info(f"User registered: {username} ({user.user_id})")

        try:
            user_registered.send(current_app._get_current_object(), user=user)
        except Exception as e:
            # Registration stands even if a subscriber fails
            current_app.logger.error(f"Error emitting user_registered signal: {e}")

        return user

    @staticmethod
    def authenticate_user(username: str = None, email: str = None, password: str = '') -> Optional[User]:
        """
        Verify credentials.

        Returns:
            User object if valid, None otherwise.
        """
        user = None
        if username:
            user = User.query.filter_by(username=username).first()
        if user is None and email:
            user = User.query.filter_by(email=email.strip().lower()).first()

        if user and user.check_password(password):
            return user
        return None
