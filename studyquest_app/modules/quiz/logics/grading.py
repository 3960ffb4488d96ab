"""
Grading Logic - Pure functions for answer checking, points and quiz scores.

NO database, NO Flask.
"""
from typing import Iterable, Optional, Sequence

from studyquest_app.utils.math_utils import round_half_up

DIFFICULTY_POINTS = {
    'easy': 10,
    'medium': 20,
    'hard': 30,
}


def normalize_answer(value: Optional[str]) -> str:
    """Trim and lowercase; None becomes an empty string."""
    if value is None:
        return ''
    return str(value).strip().lower()


def is_answer_correct(user_answer: Optional[str], correct_answer: Optional[str]) -> bool:
    """
    Exact match after normalisation.

    >>> is_answer_correct('  Mitochondria ', 'mitochondria')
    True
    >>> is_answer_correct('Mitochondrion', 'mitochondria')
    False
    """
    return normalize_answer(user_answer) == normalize_answer(correct_answer)


def points_for(difficulty: Optional[str], is_correct: bool) -> int:
    """Points for one answer: 10/20/30 by difficulty when correct, 0 otherwise."""
    if not is_correct:
        return 0
    return DIFFICULTY_POINTS.get(normalize_answer(difficulty), 0)


def score_percentage(correct: int, total: int) -> int:
    """100 * correct / total rounded half up, and 0 for an empty quiz."""
    if not total:
        return 0
    return round_half_up(100 * correct / total)


def average_time(times: Sequence[Optional[float]]) -> float:
    """Mean elapsed seconds; missing values count as 0."""
    if not times:
        return 0.0
    return sum(t or 0 for t in times) / len(times)


def total_points(answers: Iterable[tuple]) -> int:
    """Sum of points over (difficulty, is_correct) pairs."""
    return sum(points_for(difficulty, is_correct) for difficulty, is_correct in answers)
