"""
Progress Aggregator
Read-only views over progress rows, completed quiz sessions and achievements.
"""
from typing import Any, Dict, List, Optional

from studyquest_app.models import UserAchievement, UserProgress, QuizSession
from studyquest_app.utils.math_utils import round_half_up
from studyquest_app.utils.time_utils import isoformat
from ..logics.time_logic import TimeLogic

RECENT_QUIZ_LIMIT = 10


class ProgressAggregator:
    """Tổng hợp tiến độ học tập của một người dùng."""

    @staticmethod
    def _progress_rows(user_id: int, subject: Optional[str] = None) -> List[UserProgress]:
        query = UserProgress.query.filter(UserProgress.user_id == user_id)
        if subject:
            query = query.filter(UserProgress.subject == subject)
        # Most recently active subject first; rows never active go last
        return query.order_by(
            UserProgress.last_activity_at.is_(None),
            UserProgress.last_activity_at.desc(),
            UserProgress.id,
        ).all()

    @staticmethod
    def get_progress(user_id: int, subject: Optional[str] = None, timeframe: str = 'week') -> Dict[str, Any]:
        progress = ProgressAggregator._progress_rows(user_id, subject)

        cutoff = TimeLogic.get_timeframe_start(timeframe)
        quiz_query = QuizSession.query.filter(
            QuizSession.user_id == user_id,
            QuizSession.status == QuizSession.STATUS_COMPLETED,
            QuizSession.completed_at >= cutoff,
        )
        if subject:
            quiz_query = quiz_query.filter(QuizSession.subject == subject)
        quiz_history = quiz_query.order_by(
            QuizSession.completed_at.desc(), QuizSession.session_id.desc()
        ).all()

        achievements = (
            UserAchievement.query.filter_by(user_id=user_id)
            .order_by(UserAchievement.earned_at.desc(), UserAchievement.id.desc())
            .all()
        )

        total_quizzes = len(quiz_history)
        average_score = (
            round_half_up(sum(quiz.score or 0 for quiz in quiz_history) / total_quizzes) if total_quizzes else 0
        )

        subject_stats = []
        for row in progress:
            subject_stats.append({
                'subject': row.subject,
                'average_score': round_half_up(row.average_score or 0),
                'total_questions': row.total_questions_answered or 0,
                'correct_answers': row.correct_answers or 0,
                'accuracy': row.accuracy,
                'weak_topics': row.weak_topics or [],
                'strong_topics': row.strong_topics or [],
                'total_points': row.total_points or 0,
                'last_activity': isoformat(row.last_activity_at),
            })

        return {
            'overview': {
                'total_quizzes': total_quizzes,
                'average_score': average_score,
                'total_points': sum(row.total_points or 0 for row in progress),
                'current_streak': (progress[0].current_streak or 0) if progress else 0,
                'longest_streak': max((row.longest_streak or 0 for row in progress), default=0),
                'achievements_count': len(achievements),
            },
            'subject_stats': subject_stats,
            'recent_quizzes': [
                {
                    'date': isoformat(quiz.completed_at),
                    'score': quiz.score,
                    'subject': quiz.subject,
                    'question_count': quiz.question_count,
                }
                for quiz in quiz_history[:RECENT_QUIZ_LIMIT]
            ],
            'achievements': [row.to_dict() for row in achievements],
            'timeframe': timeframe,
        }
