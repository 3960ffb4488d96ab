"""
Public API of the gamification module.

The quiz lifecycle calls these as best-effort side effects: a failure is
logged and rolled back but never propagated to the caller.
"""
from typing import Any, Dict, List, Optional

from flask import current_app

from studyquest_app.db_instance import db
from .services.achievement_service import AchievementService
from .services.points_service import PointsService
from .services.progress_service import ProgressService


def get_user_progress(user_id: int, subject: str) -> Optional[Dict[str, Any]]:
    """Progress snapshot for a subject, or None if the user never studied it."""
    progress = ProgressService.get_progress(user_id, subject)
    return progress.to_dict() if progress else None


def award_quiz_points(
    user_id: int, subject: str, points: int, score: int, quiz_session_id: Optional[int] = None
) -> bool:
    """Credit quiz points. Returns False when the side effect failed."""
    try:
        PointsService.award_quiz_points(user_id, subject, points, score, quiz_session_id)
        return True
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(
            f"[Gamification] Error awarding quiz points for user {user_id}: {e}", exc_info=True
        )
        return False


def check_achievements(user_id: int, quiz_score: Optional[int], subject: Optional[str]) -> List[Dict[str, Any]]:
    """Newly earned achievements, or an empty list when the check failed."""
    try:
        return AchievementService.check_achievements(user_id, quiz_score, subject)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(
            f"[Gamification] Error checking achievements for user {user_id}: {e}", exc_info=True
        )
        return []
