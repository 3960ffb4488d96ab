from datetime import datetime, timedelta, timezone
from typing import Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TIMEFRAME_DAYS = {
    'week': 7,
    'month': 30,
    'year': 365,
}


class TimeLogic:
    @staticmethod
    def get_timeframe_start(timeframe: Optional[str], now: Optional[datetime] = None) -> datetime:
        """
        Logic thuần túy tính toán mốc thời gian bắt đầu.
        Rolling window (now - N days); 'all' and unknown values fall back to the epoch.
        """
        days = TIMEFRAME_DAYS.get((timeframe or '').lower())
        if days is None:
            return EPOCH
        now = now or datetime.now(timezone.utc)
        return now - timedelta(days=days)

    @staticmethod
    def clamp_limit(raw: Optional[str], default: int = 50, maximum: int = 100) -> int:
        """Parse a ``limit`` query value, falling back to ``default`` when unusable."""
        try:
            value = int(raw) if raw not in (None, '') else default
        except (TypeError, ValueError):
            value = default
        return max(1, min(value, maximum))
