from sqlalchemy.types import JSON

from ..db_instance import db
from ..utils.time_utils import utcnow


class QuizSession(db.Model):
    """
    One attempt at an adaptive quiz. Moves from 'active' to 'completed' exactly once.
    """
    __tablename__ = 'quiz_sessions'

    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'

    session_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    subject = db.Column(db.String(120), nullable=False, index=True)
    question_count = db.Column(db.Integer, nullable=False)
    # Questions handed out at start, in presentation order
    question_ids = db.Column(JSON, default=list)
    status = db.Column(db.String(20), default=STATUS_ACTIVE, nullable=False, index=True)
    adaptive_difficulty = db.Column(db.String(10))

    # Completion results
    score = db.Column(db.Integer, nullable=True)
    points_earned = db.Column(db.Integer, default=0)
    ai_analysis = db.Column(db.Text)
    recommendations = db.Column(JSON, default=list)
    analysis = db.Column(JSON, nullable=True)

    started_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    completed_at = db.Column(db.DateTime(timezone=True), index=True)

    answers = db.relationship(
        'QuizAnswer',
        backref='quiz_session',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='QuizAnswer.answer_id',
    )

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE

    def __repr__(self):
        return f'<QuizSession {self.session_id} {self.status}>'


class QuizAnswer(db.Model):
    """A graded answer. Inserted once, never edited."""
    __tablename__ = 'quiz_answers'

    answer_id = db.Column(db.Integer, primary_key=True)
    quiz_session_id = db.Column(
        db.Integer, db.ForeignKey('quiz_sessions.session_id'), nullable=False, index=True
    )
    question_id = db.Column(db.Integer, db.ForeignKey('questions.question_id'), nullable=False)
    user_answer = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    time_taken = db.Column(db.Float, default=0)
    ai_feedback = db.Column(db.Text)
    learning_tips = db.Column(JSON, default=list)
    difficulty_adjustment = db.Column(db.String(10))
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    question = db.relationship('Question', lazy='joined')

    __table_args__ = (
        db.UniqueConstraint('quiz_session_id', 'question_id', name='_quiz_session_question_uc'),
    )

    def __repr__(self):
        return f'<QuizAnswer session={self.quiz_session_id} question={self.question_id}>'
