"""
Progress Logic - Pure helpers for per-subject progress bookkeeping.

NO database, NO Flask.
"""
from typing import List, Optional, Tuple

# Topic lists are shown on the dashboard; keep them short.
MAX_TOPICS = 10


def update_topic_lists(
    weak_topics: Optional[List[str]],
    strong_topics: Optional[List[str]],
    topic: Optional[str],
    is_correct: bool
) -> Tuple[List[str], List[str]]:
    """
    Move ``topic`` to the strong list on a correct answer, to the weak list otherwise.

    Returns new lists; the inputs are never mutated. Most recent topics come first.
    """
    weak = list(weak_topics or [])
    strong = list(strong_topics or [])
    if not topic:
        return weak, strong

    if is_correct:
        if topic in weak:
            weak.remove(topic)
        if topic in strong:
            strong.remove(topic)
        strong.insert(0, topic)
    else:
        if topic in strong:
            strong.remove(topic)
        if topic in weak:
            weak.remove(topic)
        weak.insert(0, topic)

    return weak[:MAX_TOPICS], strong[:MAX_TOPICS]


def fold_average(current_average: Optional[float], sample_count: int, new_value: float) -> float:
    """
    Incorporate ``new_value`` into a running mean computed over ``sample_count`` samples.

    >>> fold_average(80.0, 1, 60)
    70.0
    """
    if not sample_count or sample_count < 0:
        return float(new_value)
    return ((current_average or 0) * sample_count + new_value) / (sample_count + 1)
