"""Statistics derived from flight history.

All functions are pure: they read a history list (most recent first) and
aggregate counters, and never touch storage.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from flightfocus.models.history import HistoryRecord
from flightfocus.store import AggregateCounters


@dataclass(frozen=True, slots=True)
class DerivedStats:
    """Display statistics for the history and home screens."""

    total_flights: int
    total_focus_minutes: int
    business_credits: int
    average_session_minutes: int
    longest_session_minutes: int
    current_streak_days: int


def total_flights(history: Sequence[HistoryRecord]) -> int:
    return len(history)


def average_session_minutes(
    history: Sequence[HistoryRecord], counters: AggregateCounters
) -> int:
    """Total focus minutes per flight, rounded half up."""
    flights = len(history)
    if flights == 0:
        return 0
    return int(math.floor(counters.total_focus_minutes / flights + 0.5))


def longest_session_minutes(history: Sequence[HistoryRecord]) -> int:
    if not history:
        return 0
    return max(record.duration_minutes for record in history)


def local_date(moment: datetime) -> date:
    """Calendar date of ``moment`` in the device's local timezone."""
    return moment.astimezone().date()


def current_streak_days(
    history: Sequence[HistoryRecord], today: date | None = None
) -> int:
    """Count consecutive calendar days with flights, walking back from today.

    Each distinct date is visited newest first. A date on the cursor day or
    the day before it extends the streak and becomes the new cursor; any
    larger gap ends the walk.
    """
    if not history:
        return 0

    cursor = today or date.today()
    unique_dates = sorted(
        {local_date(record.completed_at) for record in history}, reverse=True
    )

    streak = 0
    for flight_date in unique_dates:
        diff_days = (cursor - flight_date).days
        if diff_days not in (0, 1):
            break
        streak += 1
        cursor = flight_date
    return streak


def compute_stats(
    history: Sequence[HistoryRecord],
    counters: AggregateCounters,
    today: date | None = None,
) -> DerivedStats:
    """Compute every display statistic in one pass."""
    return DerivedStats(
        total_flights=total_flights(history),
        total_focus_minutes=counters.total_focus_minutes,
        business_credits=counters.business_credits,
        average_session_minutes=average_session_minutes(history, counters),
        longest_session_minutes=longest_session_minutes(history),
        current_streak_days=current_streak_days(history, today),
    )
