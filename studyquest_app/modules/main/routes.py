from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from studyquest_app.db_instance import db
from . import main_bp


@main_bp.route('/api/health', methods=['GET'])
def health():
    """Liveness check, including database reachability."""
    try:
        db.session.execute(text('SELECT 1'))
        database = 'ok'
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Health check: database unreachable: {e}")
        database = 'unavailable'

    status_code = 200 if database == 'ok' else 503
    return jsonify({
        'status': 'ok' if status_code == 200 else 'degraded',
        'database': database,
        'ai_provider': current_app.config.get('AI_PROVIDER'),
    }), status_code
