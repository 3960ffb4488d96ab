"""User account model."""

from __future__ import annotations

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from ..db_instance import db
from ..utils.time_utils import isoformat, utcnow


class User(UserMixin, db.Model):
    """Application user model."""

    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    display_name = db.Column(db.String(120))
    # Denormalised running sum of every PointsLog entry
    total_points = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    last_seen = db.Column(db.DateTime(timezone=True))

    progress = db.relationship(
        'UserProgress', backref='user', lazy=True, cascade='all, delete-orphan'
    )
    quiz_sessions = db.relationship(
        'QuizSession', backref='user', lazy='dynamic', cascade='all, delete-orphan'
    )

    def get_id(self):
        return str(self.user_id)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def public_name(self) -> str:
        return self.display_name or self.username

    def to_dict(self) -> dict[str, object]:
        return {
            'user_id': self.user_id,
            'username': self.username,
            'email': self.email,
            'display_name': self.public_name,
            'total_points': self.total_points or 0,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.username}>'
