from sqlalchemy.types import JSON

from ..db_instance import db
from ..utils.time_utils import utcnow


class NoteSummary(db.Model):
    """AI summary of notes pasted by a user."""
    __tablename__ = 'note_summaries'

    summary_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    subject = db.Column(db.String(120))
    title = db.Column(db.String(255))
    original_content = db.Column(db.Text, nullable=False)
    summary = db.Column(db.Text)
    key_concepts = db.Column(JSON, default=list)
    study_tips = db.Column(JSON, default=list)
    potential_exam_topics = db.Column(JSON, default=list)
    difficulty_areas = db.Column(JSON, default=list)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

