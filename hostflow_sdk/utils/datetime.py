"""Clock helpers.

All timestamps are naive UTC: the entity store drops tzinfo on SQLite, so
values are normalized before they ever reach it.
"""

import calendar
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a datetime by whole calendar months, clamping the day.

    Args:
        moment: Starting point
        months: Number of months to add (may be negative)

    Returns:
        Shifted datetime (Jan 31 + 1 month -> Feb 28/29)
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def add_years(moment: datetime, years: int) -> datetime:
    """Shift a datetime by whole years (Feb 29 clamps to Feb 28)."""
    return add_months(moment, years * 12)
