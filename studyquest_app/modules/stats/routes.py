from flask import jsonify, request
from flask_login import current_user, login_required

from studyquest_app.core.error_handlers import handle_api_errors
from . import stats_bp
from .logics.time_logic import TimeLogic
from .services.dashboard_service import DashboardService
from .services.leaderboard_service import LeaderboardService
from .services.progress_aggregator import ProgressAggregator


@stats_bp.route('/progress', methods=['GET'])
@login_required
@handle_api_errors('Failed to fetch progress data')
def get_progress():
    """Tiến độ học tập của người dùng theo môn và khoảng thời gian."""
    subject = request.args.get('subject') or None
    timeframe = request.args.get('timeframe') or 'week'
    return jsonify(ProgressAggregator.get_progress(current_user.user_id, subject, timeframe))


@stats_bp.route('/leaderboard', methods=['GET'])
@login_required
@handle_api_errors('Failed to fetch leaderboard')
def get_leaderboard():
    """Bảng xếp hạng theo tổng điểm."""
    subject = request.args.get('subject') or None
    timeframe = request.args.get('timeframe') or 'month'
    limit = TimeLogic.clamp_limit(request.args.get('limit'))
    return jsonify(LeaderboardService.get_leaderboard(
        current_user.user_id, timeframe=timeframe, subject=subject, limit=limit
    ))


@stats_bp.route('/dashboard-stats', methods=['GET'])
@login_required
@handle_api_errors('Failed to fetch dashboard statistics')
def get_dashboard_stats():
    return jsonify(DashboardService.get_dashboard_stats(current_user.user_id))
