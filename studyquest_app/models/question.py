"""Question store models populated by the content generator."""

from __future__ import annotations

from sqlalchemy.types import JSON

from ..db_instance import db
from ..utils.time_utils import isoformat, utcnow


class Question(db.Model):
    """A generated quiz question. Rows are never edited after insertion."""

    __tablename__ = 'questions'

    TYPE_MCQ = 'mcq'
    TYPE_TRUE_FALSE = 'true_false'
    TYPE_CONCEPTUAL = 'conceptual'
    TYPE_APPLICATION = 'application'
    TYPES = (TYPE_MCQ, TYPE_TRUE_FALSE, TYPE_CONCEPTUAL, TYPE_APPLICATION)

    DIFFICULTIES = ('easy', 'medium', 'hard')

    SOURCE_TEXT = 'text'
    SOURCE_PDF = 'pdf'

    question_id = db.Column(db.Integer, primary_key=True)
    creator_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=True, index=True)
    subject = db.Column(db.String(120), nullable=False, index=True)
    topic = db.Column(db.String(200))
    question_text = db.Column(db.Text, nullable=False)
    question_type = db.Column(db.String(20), nullable=False, default=TYPE_MCQ)
    difficulty = db.Column(db.String(10), nullable=False, default='medium')
    # Only populated for mcq questions
    options = db.Column(JSON, nullable=True)
    correct_answer = db.Column(db.Text, nullable=False)
    explanation = db.Column(db.Text)
    keywords = db.Column(JSON, default=list)
    source_content = db.Column(db.Text)
    source_type = db.Column(db.String(20), default=SOURCE_TEXT)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)

    def to_quiz_dict(self, question_number: int) -> dict[str, object]:
        """Shape sent to a quiz taker; never carries the answer."""
        return {
            'id': self.question_id,
            'question_number': question_number,
            'question': self.question_text,
            'type': self.question_type,
            'difficulty': self.difficulty,
            'options': self.options,
            'topic': self.topic,
        }

    def to_dict(self) -> dict[str, object]:
        return {
            'id': self.question_id,
            'subject': self.subject,
            'topic': self.topic,
            'question': self.question_text,
            'type': self.question_type,
            'difficulty': self.difficulty,
            'options': self.options,
            'correct_answer': self.correct_answer,
            'explanation': self.explanation,
            'keywords': self.keywords or [],
            'source_type': self.source_type,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<Question {self.question_id} [{self.subject}/{self.difficulty}]>'


class QuestionBank(db.Model):
    """Named collection recorded when questions are generated from a document."""

    __tablename__ = 'question_banks'

    bank_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    question_count = db.Column(db.Integer, default=0, nullable=False)
    source_file = db.Column(db.String(255))
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
