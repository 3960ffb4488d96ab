"""Database models package for StudyQuest."""

from ..db_instance import db

from .user import User
from .question import Question, QuestionBank
from .quiz import QuizAnswer, QuizSession
from .progress import Achievement, PointsLog, UserAchievement, UserProgress
from .note import NoteSummary

__all__ = [
    'db',
    'User',
    'Question',
    'QuestionBank',
    'QuizSession',
    'QuizAnswer',
    'UserProgress',
    'PointsLog',
    'Achievement',
    'UserAchievement',
    'NoteSummary',
]
