"""
Progress Service
================
Maintains the per-subject UserProgress rows: answer counters, topic lists,
daily streaks and quiz bookkeeping.
"""
from typing import Optional

from flask import current_app

from studyquest_app.db_instance import db
from studyquest_app.models import UserProgress
from studyquest_app.utils.time_utils import utcnow
from ..logics.progress_logic import fold_average, update_topic_lists
from ..logics.streak_logic import advance_streak


class ProgressService:
    """Service for the per-user, per-subject progress aggregate."""

    @staticmethod
    def get_progress(user_id: int, subject: str) -> Optional[UserProgress]:
        return UserProgress.query.filter_by(user_id=user_id, subject=subject).first()

    @staticmethod
    def get_or_create_progress(user_id: int, subject: str) -> UserProgress:
        """Get or create the progress row. The new row is added but not committed."""
        progress = ProgressService.get_progress(user_id, subject)
        if progress is None:
            progress = UserProgress(
                user_id=user_id,
                subject=subject,
                total_questions_answered=0,
                correct_answers=0,
                quizzes_taken=0,
                average_score=0,
                total_points=0,
                current_streak=0,
                longest_streak=0,
                weak_topics=[],
                strong_topics=[],
            )
            db.session.add(progress)
        return progress

    @staticmethod
    def record_answer(
        user_id: int,
        subject: str,
        topic: Optional[str],
        is_correct: bool,
        difficulty: Optional[str] = None,
        time_taken: float = 0
    ) -> UserProgress:
        """
        Fold one graded answer into the subject progress and advance the streak.

        Points are not touched here; they are credited when the quiz completes.
        """
        now = utcnow()
        progress = ProgressService.get_or_create_progress(user_id, subject)

        progress.total_questions_answered = (progress.total_questions_answered or 0) + 1
        if is_correct:
            progress.correct_answers = (progress.correct_answers or 0) + 1

        progress.weak_topics, progress.strong_topics = update_topic_lists(
            progress.weak_topics, progress.strong_topics, topic, is_correct
        )
        progress.current_streak, progress.longest_streak = advance_streak(
            progress.last_activity_at,
            progress.current_streak,
            progress.longest_streak,
            today=now.date(),
        )
        progress.last_activity_at = now

        db.session.commit()
        current_app.logger.debug(
            f"[Gamification] Progress updated: user={user_id} subject={subject} "
            f"topic={topic} correct={is_correct} difficulty={difficulty} time={time_taken}s"
        )
        return progress

    @staticmethod
    def record_quiz_completion(progress: UserProgress, score: int) -> None:
        """Increment quizzes taken and fold ``score`` into the running average (no commit)."""
        taken = progress.quizzes_taken or 0
        progress.average_score = fold_average(progress.average_score, taken, score)
        progress.quizzes_taken = taken + 1
        progress.last_activity_at = utcnow()
