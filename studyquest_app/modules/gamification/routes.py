from flask import jsonify, request
from flask_login import current_user, login_required

from studyquest_app.core.error_handlers import handle_api_errors
from . import gamification_bp
from .services.achievement_service import AchievementService
from .services.points_service import PointsService


@gamification_bp.route('/achievements', methods=['GET'])
@login_required
@handle_api_errors('Failed to fetch achievements')
def list_achievements():
    """Danh mục thành tích kèm trạng thái đã đạt của người dùng."""
    catalogue = AchievementService.get_catalogue(current_user.user_id)
    return jsonify({
        'success': True,
        'achievements': catalogue,
        'earned_count': sum(1 for item in catalogue if item['earned']),
    })


@gamification_bp.route('/points-history', methods=['GET'])
@login_required
@handle_api_errors('Failed to fetch points history')
def points_history():
    """API lấy lịch sử điểm thưởng."""
    page = request.args.get('page', 1, type=int)
    per_page = min(request.args.get('per_page', 20, type=int), 100)

    logs, total = PointsService.get_points_history(current_user.user_id, page, per_page)

    return jsonify({
        'success': True,
        'logs': [log.to_dict() for log in logs],
        'total': total,
        'page': page,
        'per_page': per_page,
    })
