"""
Review streak calculation.

This is a pure computation module with no I/O.
"""

from datetime import date, datetime, timedelta, timezone

from hifz.domain.models import ReviewEntry


def review_day(epoch_ms: int) -> date:
    """UTC calendar day of an epoch-milliseconds timestamp."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).date()


def compute_streak(entries: list[ReviewEntry], now: int) -> int:
    """
    Count consecutive days with at least one review, ending at ``now``.

    A run that ended yesterday still counts: today has not been missed
    until it is over. Reviews stamped after ``now`` are ignored.
    """
    today = review_day(now)
    days = {review_day(e.reviewed_at) for e in entries if e.reviewed_at <= now}
    if not days:
        return 0

    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
