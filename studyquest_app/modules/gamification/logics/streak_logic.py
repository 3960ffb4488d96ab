"""
Streak Logic - Pure functions for streak calculation.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple, Union


def advance_streak(
    last_activity: Union[date, datetime, str, None],
    current_streak: int,
    longest_streak: int,
    today: date = None
) -> Tuple[int, int]:
    """
    Tính chuỗi ngày hoạt động sau một hoạt động mới vào ngày ``today``.

    Args:
        last_activity: Thời điểm hoạt động gần nhất trước đó (None nếu chưa từng).
        current_streak: Chuỗi hiện tại đang lưu.
        longest_streak: Chuỗi dài nhất đang lưu.
        today: Ngày hiện tại (UTC), mặc định là hôm nay.

    Returns:
        (current_streak, longest_streak) mới.

    Examples:
        >>> advance_streak(date(2024, 1, 2), 3, 5, today=date(2024, 1, 3))
        (4, 5)
        >>> advance_streak(date(2024, 1, 3), 3, 5, today=date(2024, 1, 3))
        (3, 5)
        >>> advance_streak(date(2023, 12, 30), 3, 5, today=date(2024, 1, 3))
        (1, 5)
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    last_day = _normalize_to_date(last_activity)
    current_streak = current_streak or 0

    if last_day is None:
        new_streak = 1
    elif last_day == today:
        # Already active today; a streak of 0 only happens for legacy rows
        new_streak = max(current_streak, 1)
    elif last_day == today - timedelta(days=1):
        new_streak = current_streak + 1
    else:
        new_streak = 1

    return new_streak, max(longest_streak or 0, new_streak)


def _normalize_to_date(val: Union[date, datetime, str, None]) -> Optional[date]:
    """
    Normalize various date representations to a UTC date object.

    Naive datetimes are assumed to be UTC, matching how they are stored.
    """
    if val is None:
        return None

    if isinstance(val, datetime):
        if val.tzinfo is not None:
            val = val.astimezone(timezone.utc)
        return val.date()

    if isinstance(val, date):
        return val

    if isinstance(val, str):
        try:
            return _normalize_to_date(datetime.fromisoformat(val))
        except ValueError:
            return None

    return None
