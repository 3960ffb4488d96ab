"""
Achievement Service
Logic kiểm tra và cấp phát thành tích (Achievements).
"""
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func

from studyquest_app.core.signals import points_awarded
from studyquest_app.db_instance import db
from studyquest_app.models import Achievement, PointsLog, User, UserAchievement, UserProgress
from .points_service import PointsService


class AchievementService:
    """Dịch vụ quản lý logic cấp phát thành tích."""

    @staticmethod
    def _user_metrics(user_id: int) -> Dict[str, int]:
        quizzes, best_streak = db.session.query(
            func.coalesce(func.sum(UserProgress.quizzes_taken), 0),
            func.coalesce(func.max(UserProgress.longest_streak), 0),
        ).filter(UserProgress.user_id == user_id).one()
        user = db.session.get(User, user_id)
        return {
            'quizzes_taken': int(quizzes or 0),
            'best_streak': int(best_streak or 0),
            'total_points': (user.total_points or 0) if user else 0,
        }

    @staticmethod
    def _is_met(achievement: Achievement, metrics: Dict[str, int], quiz_score: Optional[int]) -> bool:
        condition = achievement.condition_type
        if condition == Achievement.TYPE_QUIZ_COUNT:
            return metrics['quizzes_taken'] >= achievement.condition_value
        if condition == Achievement.TYPE_PERFECT_SCORE:
            return quiz_score is not None and quiz_score >= achievement.condition_value
        if condition == Achievement.TYPE_TOTAL_POINTS:
            return metrics['total_points'] >= achievement.condition_value
        if condition == Achievement.TYPE_STREAK:
            return metrics['best_streak'] >= achievement.condition_value
        return False

    @staticmethod
    def check_achievements(user_id: int, quiz_score: Optional[int], subject: Optional[str]) -> List[Dict[str, Any]]:
        """
        Award every active achievement whose condition is now met.

        Returns the newly earned achievements as dictionaries.
        """
        active = Achievement.query.filter_by(is_active=True).order_by(Achievement.achievement_id).all()
        if not active:
            return []

        earned_ids = {
            row.achievement_id
            for row in UserAchievement.query.filter_by(user_id=user_id).all()
        }
        metrics = AchievementService._user_metrics(user_id)

        new_rows = []
        for achievement in active:
            if achievement.achievement_id in earned_ids:
                continue
            if not AchievementService._is_met(achievement, metrics, quiz_score):
                continue

            row = UserAchievement(user_id=user_id, achievement_id=achievement.achievement_id, subject=subject)
            row.achievement = achievement
            db.session.add(row)
            new_rows.append(row)

            if achievement.reward_points:
                metrics['total_points'] = PointsService.credit(
                    user_id,
                    achievement.reward_points,
                    PointsLog.SOURCE_ACHIEVEMENT,
                    subject=subject,
                )

        if not new_rows:
            return []

        db.session.commit()
        current_app.logger.info(
            f"[Gamification] User {user_id} đạt {len(new_rows)} thành tích mới: "
            f"{', '.join(row.achievement.key for row in new_rows)}"
        )

        reward = sum(row.achievement.reward_points or 0 for row in new_rows)
        if reward:
            points_awarded.send(
                None,
                user_id=user_id,
                points=reward,
                source=PointsLog.SOURCE_ACHIEVEMENT,
                subject=subject,
                new_total=metrics['total_points'],
            )

        return [row.to_dict() for row in new_rows]

    @staticmethod
    def get_user_achievements(user_id: int) -> List[UserAchievement]:
        return (
            UserAchievement.query.filter_by(user_id=user_id)
            .order_by(UserAchievement.earned_at.desc(), UserAchievement.id.desc())
            .all()
        )

    @staticmethod
    def get_catalogue(user_id: int) -> List[Dict[str, Any]]:
        """All active achievements with the caller's earned state."""
        earned = {row.achievement_id: row for row in AchievementService.get_user_achievements(user_id)}
        catalogue = []
        for achievement in Achievement.query.filter_by(is_active=True).order_by(Achievement.achievement_id):
            item = achievement.to_dict()
            row = earned.get(achievement.achievement_id)
            item['earned'] = row is not None
            item['earned_at'] = row.to_dict()['earned_at'] if row else None
            catalogue.append(item)
        return catalogue
