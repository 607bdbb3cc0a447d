"""
Loan duration and overtime helpers.

Durations are whole minutes, floored (a loan that lasted 59 s is 0
minutes long; a negative span floors towards minus infinity).

``is_overtime`` keeps the historical formula ``(end_date - now) > limit``,
which measures how far *ahead* the planned end date is.  Callers relying
on it should be aware it does not measure time elapsed past the deadline.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from .clock import Clock

SECONDS_PER_MINUTE = 60


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from *start* to *end*, floored."""
    return math.floor((end - start).total_seconds() / SECONDS_PER_MINUTE)


def duration_in_minutes(
    start_date: datetime,
    end_date: Optional[datetime],
    is_active: bool,
    *,
    clock: Clock,
) -> Optional[int]:
    """
    Return the loan duration in minutes.

    * ``end_date`` given: span from start to end, whatever ``is_active`` says.
    * no ``end_date``, active: live reading against ``clock.now()``.
    * no ``end_date``, not active: ``None``, the duration is undefined.
    """
    if end_date is None:
        if is_active:
            return minutes_between(start_date, clock.now())
        return None
    return minutes_between(start_date, end_date)


def is_overtime(end_date: datetime, limit_minutes: float, *, clock: Clock) -> bool:
    """True when *end_date* lies more than *limit_minutes* after ``clock.now()``."""
    diff = (end_date - clock.now()).total_seconds() / SECONDS_PER_MINUTE
    return diff > limit_minutes
