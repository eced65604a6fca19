"""Calendar-day arithmetic shared by the scheduling engine.

Day counts use the ceiling of the elapsed time in days, so a deadline
30 minutes away is 1 day away and a deadline 30 minutes ago is 0 days away.
"""

import math
from datetime import date, datetime

SECONDS_PER_DAY = 24 * 60 * 60


def days_until(when: datetime, now: datetime) -> int:
    """Whole days from `now` until `when` (ceiling; negative once past)."""
    return math.ceil((when - now).total_seconds() / SECONDS_PER_DAY)


def days_since(when: datetime, now: datetime) -> int:
    """Whole days elapsed from `when` until `now` (ceiling)."""
    return math.ceil((now - when).total_seconds() / SECONDS_PER_DAY)


def calendar_date(when: datetime) -> date:
    """Truncate a timestamp to its calendar date."""
    return when.date()
