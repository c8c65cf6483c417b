"""Timezone-aware "now" helpers and calendar arithmetic."""

import calendar
from datetime import date, datetime

import pytz

PERIOD_MONTHS = {
    "current-month": 1,
    "current-quarter": 3,
    "current-year": 12,
}


def local_now(timezone_name: str) -> datetime:
    return datetime.now(pytz.timezone(timezone_name))


def local_today(timezone_name: str) -> date:
    return local_now(timezone_name).date()


def months_ago(day: date, months: int) -> date:
    """Return the same day ``months`` calendar months earlier, clamped to month end."""
    year, month = divmod(day.year * 12 + day.month - 1 - months, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def period_start(period: str, today: date) -> date | None:
    """First day included by a named reporting period, None for all time."""
    months = PERIOD_MONTHS.get(period)
    if months is None:
        return None
    return months_ago(today, months)
