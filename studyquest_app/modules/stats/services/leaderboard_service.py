from typing import Any, Dict, Optional

from sqlalchemy import desc, func

from studyquest_app.models import db, User, UserProgress
from studyquest_app.utils.math_utils import round_half_up
from ..logics.time_logic import TimeLogic


class LeaderboardService:
    @classmethod
    def get_leaderboard(
        cls,
        viewer_id: int,
        timeframe: str = 'month',
        subject: Optional[str] = None,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """
        Bảng xếp hạng theo tổng điểm, sau đó điểm trung bình.

        Only progress rows active at or after the timeframe cutoff are counted.
        Ties keep the order in which users first appear in the progress table.
        """
        cutoff = TimeLogic.get_timeframe_start(timeframe)

        query = db.session.query(
            UserProgress.user_id,
            func.coalesce(func.sum(UserProgress.total_points), 0).label('total_points'),
            func.coalesce(func.avg(UserProgress.average_score), 0).label('avg_score'),
            func.coalesce(func.sum(UserProgress.total_questions_answered), 0).label('total_questions'),
            func.coalesce(func.sum(UserProgress.correct_answers), 0).label('correct_answers'),
            func.coalesce(func.max(UserProgress.current_streak), 0).label('best_streak'),
            func.count(func.distinct(UserProgress.subject)).label('subjects_studied'),
            func.min(UserProgress.id).label('first_seen'),
        ).filter(UserProgress.last_activity_at >= cutoff)

        if subject:
            query = query.filter(UserProgress.subject == subject)

        rows = (
            query
            .group_by(UserProgress.user_id)
            .order_by(desc('total_points'), desc('avg_score'), 'first_seen')
            .limit(limit)
            .all()
        )

        user_ids = [row.user_id for row in rows]
        names = {}
        if user_ids:
            names = {
                user.user_id: user.public_name
                for user in User.query.filter(User.user_id.in_(user_ids)).all()
            }

        leaderboard = []
        current_user_rank = None
        for rank, row in enumerate(rows, start=1):
            total_questions = int(row.total_questions or 0)
            correct = int(row.correct_answers or 0)
            is_viewer = row.user_id == viewer_id
            if is_viewer:
                current_user_rank = rank

            leaderboard.append({
                'rank': rank,
                'user_id': row.user_id,
                'display_name': names.get(row.user_id) or f'Student {row.user_id}',
                'total_points': int(row.total_points or 0),
                'average_score': round_half_up(float(row.avg_score or 0)),
                'total_questions': total_questions,
                'accuracy': round_half_up(100 * correct / total_questions) if total_questions else 0,
                'best_streak': int(row.best_streak or 0),
                'subjects_studied': int(row.subjects_studied or 0),
                'is_current_user': is_viewer,
            })

        return {
            'leaderboard': leaderboard,
            'current_user_rank': current_user_rank,
            'timeframe': timeframe,
            'subject': subject,
        }
