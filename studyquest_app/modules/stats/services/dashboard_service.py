"""
Dashboard Service
Headline numbers, recent activity and goals for the dashboard.
"""
from typing import Any, Dict, List

from studyquest_app.models import Question, QuizSession, UserProgress
from studyquest_app.utils.math_utils import round_half_up
from studyquest_app.utils.time_utils import ensure_utc, isoformat

RECENT_QUIZZES = 5
RECENT_GENERATIONS = 3
RECENT_ACTIVITY_LIMIT = 5

GOALS = (
    # (title, metric, target)
    ('Complete 10 Quizzes', 'total_quizzes', 10),
    ('7-Day Study Streak', 'current_streak', 7),
    ('Achieve 80% Average', 'average_score', 80),
)


class DashboardService:

    @staticmethod
    def _recent_activity(user_id: int) -> List[Dict[str, Any]]:
        quizzes = (
            QuizSession.query.filter_by(user_id=user_id, status=QuizSession.STATUS_COMPLETED)
            .order_by(QuizSession.completed_at.desc(), QuizSession.session_id.desc())
            .limit(RECENT_QUIZZES)
            .all()
        )
        questions = (
            Question.query.filter_by(creator_user_id=user_id)
            .order_by(Question.created_at.desc(), Question.question_id.desc())
            .limit(RECENT_GENERATIONS)
            .all()
        )

        events = [
            (ensure_utc(quiz.completed_at), {
                'type': 'quiz',
                'subject': quiz.subject,
                'score': quiz.score,
                'created_at': isoformat(quiz.completed_at),
            })
            for quiz in quizzes
        ]
        events.extend(
            (ensure_utc(question.created_at), {
                'type': 'question_generation',
                'subject': question.subject,
                'created_at': isoformat(question.created_at),
            })
            for question in questions
        )
        # Stable sort, newest first
        events.sort(key=lambda event: event[0].timestamp() if event[0] else 0, reverse=True)
        return [payload for _, payload in events[:RECENT_ACTIVITY_LIMIT]]

    @staticmethod
    def get_dashboard_stats(user_id: int) -> Dict[str, Any]:
        progress = UserProgress.query.filter_by(user_id=user_id).all()

        stats = {
            'total_quizzes': sum(row.quizzes_taken or 0 for row in progress),
            'average_score': (
                round_half_up(sum(row.average_score or 0 for row in progress) / len(progress)) if progress else 0
            ),
            'total_points': sum(row.total_points or 0 for row in progress),
            'current_streak': max((row.current_streak or 0 for row in progress), default=0),
        }

        upcoming_goals = [
            {'title': title, 'progress': stats[metric], 'target': target}
            for title, metric, target in GOALS
            if stats[metric] < target
        ]

        return {
            **stats,
            'recent_activity': DashboardService._recent_activity(user_id),
            'upcoming_goals': upcoming_goals,
        }
