"""Per-user progress, points ledger and achievements."""

from __future__ import annotations

from sqlalchemy.types import JSON

from ..db_instance import db
from ..utils.math_utils import round_half_up
from ..utils.time_utils import isoformat, utcnow


class UserProgress(db.Model):
    """Aggregated learning statistics for one user in one subject."""

    __tablename__ = 'user_progress'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    subject = db.Column(db.String(120), nullable=False)

    total_questions_answered = db.Column(db.Integer, default=0, nullable=False)
    correct_answers = db.Column(db.Integer, default=0, nullable=False)
    quizzes_taken = db.Column(db.Integer, default=0, nullable=False)
    # Running mean of completed quiz scores (0-100)
    average_score = db.Column(db.Float, default=0, nullable=False)
    total_points = db.Column(db.Integer, default=0, nullable=False)
    current_streak = db.Column(db.Integer, default=0, nullable=False)
    longest_streak = db.Column(db.Integer, default=0, nullable=False)
    weak_topics = db.Column(JSON, default=list)
    strong_topics = db.Column(JSON, default=list)
    last_activity_at = db.Column(db.DateTime(timezone=True), index=True)

    __table_args__ = (db.UniqueConstraint('user_id', 'subject', name='_user_subject_uc'),)

    @property
    def accuracy(self) -> int:
        if not self.total_questions_answered:
            return 0
        return round_half_up(100 * (self.correct_answers or 0) / self.total_questions_answered)

    def to_dict(self) -> dict[str, object]:
        return {
            'subject': self.subject,
            'average_score': round_half_up(self.average_score or 0),
            'total_questions': self.total_questions_answered or 0,
            'correct_answers': self.correct_answers or 0,
            'accuracy': self.accuracy,
            'quizzes_taken': self.quizzes_taken or 0,
            'weak_topics': self.weak_topics or [],
            'strong_topics': self.strong_topics or [],
            'total_points': self.total_points or 0,
            'current_streak': self.current_streak or 0,
            'longest_streak': self.longest_streak or 0,
            'last_activity': isoformat(self.last_activity_at),
        }


class PointsLog(db.Model):
    """Ledger of every point accrual."""

    __tablename__ = 'points_logs'

    SOURCE_QUIZ_COMPLETION = 'quiz_completion'
    SOURCE_ACHIEVEMENT = 'achievement'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    points = db.Column(db.Integer, nullable=False)
    source = db.Column(db.String(50), nullable=False)
    subject = db.Column(db.String(120))
    quiz_session_id = db.Column(db.Integer, db.ForeignKey('quiz_sessions.session_id'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)

    def to_dict(self) -> dict[str, object]:
        return {
            'id': self.id,
            'points': self.points,
            'source': self.source,
            'subject': self.subject,
            'quiz_session_id': self.quiz_session_id,
            'created_at': isoformat(self.created_at),
        }


class Achievement(db.Model):
    """Catalogue entry describing how an achievement is earned."""

    __tablename__ = 'achievements'

    TYPE_QUIZ_COUNT = 'QUIZ_COUNT'
    TYPE_PERFECT_SCORE = 'PERFECT_SCORE'
    TYPE_TOTAL_POINTS = 'TOTAL_POINTS'
    TYPE_STREAK = 'STREAK'

    achievement_id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    icon = db.Column(db.String(50), default='fa-medal')
    condition_type = db.Column(db.String(50), nullable=False)
    condition_value = db.Column(db.Integer, nullable=False)
    reward_points = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)

    def to_dict(self) -> dict[str, object]:
        return {
            'id': self.achievement_id,
            'key': self.key,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'reward_points': self.reward_points or 0,
        }

    def __repr__(self):
        return f'<Achievement {self.key}>'


class UserAchievement(db.Model):
    """An achievement earned by a user."""

    __tablename__ = 'user_achievements'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    achievement_id = db.Column(
        db.Integer, db.ForeignKey('achievements.achievement_id'), nullable=False
    )
    subject = db.Column(db.String(120))
    earned_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    achievement = db.relationship('Achievement', lazy='joined')

    __table_args__ = (db.UniqueConstraint('user_id', 'achievement_id', name='_user_achievement_uc'),)

    def to_dict(self) -> dict[str, object]:
        payload = self.achievement.to_dict()
        payload['subject'] = self.subject
        payload['earned_at'] = isoformat(self.earned_at)
        return payload
