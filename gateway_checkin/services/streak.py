"""Streak calculation over check-in dates.

Two walks with deliberately different inputs:

* ``current_streak`` looks only at the most recent records (at most
  ``RECENT_WINDOW``) and requires position ``i`` of the descending list to
  be ``anchor - i`` days. The anchor itself must be present.
* ``streak_as_of`` checks membership in the user's full date set, walking
  back from an arbitrary anchor for at most ``HISTORY_WINDOW_DAYS`` days.
"""

from collections.abc import Container, Sequence
from datetime import date, timedelta

from gateway_checkin.utils.dates import format_date, parse_date

RECENT_WINDOW = 30
HISTORY_WINDOW_DAYS = 365


def current_streak(recent_dates: Sequence[str], anchor: date) -> int:
    """Consecutive days ending at ``anchor``.

    Args:
        recent_dates: Check-in dates, most recent first
        anchor: Last day of the streak (usually today)

    Returns:
        Number of contiguous days; 0 when ``anchor`` has no record
    """
    streak = 0
    for offset, checkin_date in enumerate(recent_dates[:RECENT_WINDOW]):
        expected = format_date(anchor - timedelta(days=offset))
        if checkin_date != expected:
            break
        streak += 1
    return streak


def streak_as_of(
    dates: Container[str],
    anchor: str,
    max_days: int = HISTORY_WINDOW_DAYS,
) -> int:
    """Consecutive days ending at ``anchor`` within the full date set."""
    base_day = parse_date(anchor)
    if base_day is None:
        return 0

    streak = 0
    for offset in range(max_days):
        if format_date(base_day - timedelta(days=offset)) not in dates:
            break
        streak += 1
    return streak
