"""
Points Service
Credits points to users and keeps the PointsLog ledger.
"""
from typing import Optional

from flask import current_app

from studyquest_app.core.signals import points_awarded
from studyquest_app.db_instance import db
from studyquest_app.models import PointsLog, User
from .progress_service import ProgressService


class PointsService:
    """Dịch vụ quản lý điểm thưởng."""

    @staticmethod
    def credit(
        user_id: int,
        points: int,
        source: str,
        subject: Optional[str] = None,
        quiz_session_id: Optional[int] = None
    ) -> int:
        """
        Add a ledger row and update the denormalised totals (no commit).

        Returns the user's new total.
        """
        user = db.session.get(User, user_id)
        if user is None:
            raise LookupError(f"User {user_id} not found")

        if points:
            db.session.add(PointsLog(
                user_id=user_id,
                points=points,
                source=source,
                subject=subject,
                quiz_session_id=quiz_session_id,
            ))
            user.total_points = (user.total_points or 0) + points
            if subject:
                progress = ProgressService.get_or_create_progress(user_id, subject)
                progress.total_points = (progress.total_points or 0) + points

        return user.total_points or 0

    @staticmethod
    def award_quiz_points(
        user_id: int,
        subject: str,
        points: int,
        score: int,
        quiz_session_id: Optional[int] = None
    ) -> int:
        """
        Credit the points earned by a completed quiz and update quiz bookkeeping.

        Returns the user's new total.
        """
        new_total = PointsService.credit(
            user_id,
            points,
            PointsLog.SOURCE_QUIZ_COMPLETION,
            subject=subject,
            quiz_session_id=quiz_session_id,
        )
        progress = ProgressService.get_or_create_progress(user_id, subject)
        ProgressService.record_quiz_completion(progress, score)
        db.session.commit()

        current_app.logger.info(
            f"[Gamification] +{points} điểm cho user {user_id} ({subject}), tổng mới {new_total}"
        )
        points_awarded.send(
            None,
            user_id=user_id,
            points=points,
            source=PointsLog.SOURCE_QUIZ_COMPLETION,
            subject=subject,
            new_total=new_total,
        )
        return new_total

    @staticmethod
    def get_points_history(user_id: int, page: int = 1, per_page: int = 20):
        """Lấy lịch sử điểm của user có phân trang."""
        pagination = PointsLog.query.filter_by(user_id=user_id)\
            .order_by(PointsLog.created_at.desc(), PointsLog.id.desc())\
            .paginate(page=page, per_page=per_page, error_out=False)

        return pagination.items, pagination.total
