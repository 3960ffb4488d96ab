# File: studyquest_app/modules/auth/routes.py
from datetime import timedelta

from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy.exc import SQLAlchemyError

from studyquest_app.core.error_handlers import UnauthorizedError, handle_api_errors, success_response
from studyquest_app.db_instance import db
from studyquest_app.utils.request_utils import load_json
from studyquest_app.utils.time_utils import ensure_utc, utcnow
from . import auth_bp
from .schemas import LoginSchema, SignupSchema
from .services import AuthService

LAST_SEEN_INTERVAL = timedelta(minutes=5)


@auth_bp.before_app_request
def update_last_seen():
    """Update user's last_seen timestamp."""
    if not current_user.is_authenticated:
        return
    now = utcnow()
    last_seen = ensure_utc(current_user.last_seen)
    if last_seen is None or now - last_seen > LAST_SEEN_INTERVAL:
        current_user.last_seen = now
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(f"Không thể cập nhật last_seen cho user {current_user.user_id}: {e}")


def _auth_payload(user):
    return {
        'success': True,
        'user': user.to_dict(),
        'token': AuthService.generate_token(user),
    }


@auth_bp.route('/api/signup', methods=['POST'])
@handle_api_errors('Failed to register user')
def signup():
    data = load_json(SignupSchema())
    user = AuthService.register_user(
        data['username'], data['email'], data['password'], display_name=data['display_name']
    )
    login_user(user)
    return jsonify(_auth_payload(user)), 201


@auth_bp.route('/api/login', methods=['POST'])
@handle_api_errors('Failed to log in')
def login():
    data = load_json(LoginSchema())
    user = AuthService.authenticate_user(
        username=data['username'], email=data['email'], password=data['password']
    )
    if user is None:
        raise UnauthorizedError('Invalid username or password')
    login_user(user)
    return jsonify(_auth_payload(user))


@auth_bp.route('/api/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify(success_response(message='Logged out'))


@auth_bp.route('/api/me', methods=['GET'])
@login_required
def me():
    return jsonify({'success': True, 'user': current_user.to_dict()})
