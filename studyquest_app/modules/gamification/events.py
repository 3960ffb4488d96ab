"""
Event Handlers for Gamification Module.

Listens to signals from the quiz module and updates progress, so the quiz
lifecycle does not need to know about gamification internals.
"""
from flask import current_app

from studyquest_app.core.signals import answer_submitted
from studyquest_app.db_instance import db


@answer_submitted.connect
def on_answer_submitted(sender, **kwargs):
    """
    Fold a graded answer into the user's subject progress.

    Expected kwargs:
        - user_id: int
        - subject: str
        - topic: str
        - is_correct: bool
        - difficulty: str
        - time_taken: float
    """
    from .services.progress_service import ProgressService

    user_id = kwargs.get('user_id')
    subject = kwargs.get('subject')
    if not user_id or not subject:
        return

    try:
        ProgressService.record_answer(
            user_id=user_id,
            subject=subject,
            topic=kwargs.get('topic'),
            is_correct=bool(kwargs.get('is_correct')),
            difficulty=kwargs.get('difficulty'),
            time_taken=kwargs.get('time_taken', 0),
        )
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"[Gamification] Error updating progress: {e}", exc_info=True)
