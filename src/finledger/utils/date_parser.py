"""Date parsing utilities."""

from calendar import monthrange
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def _period_start(period: str, today: date) -> Optional[date]:
    """First day of a named period relative to today ('this month', 'last week', ...)."""
    starts = {
        "this month": today.replace(day=1),
        "this year": today.replace(month=1, day=1),
        "this week": today - timedelta(days=today.weekday()),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
        "last week": today - timedelta(days=today.weekday() + 7),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "next year": today.replace(month=1, day=1) + relativedelta(years=1),
        "next week": today + timedelta(days=7 - today.weekday()),
    }
    return starts.get(period)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones ("today", "yesterday", "tomorrow", "last month", "this year", ...).
    Relative periods resolve to their first day.

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_days = {"today": 0, "yesterday": -1, "tomorrow": 1}
    if date_str in relative_days:
        return today + timedelta(days=relative_days[date_str])

    start = _period_start(date_str, today)
    if start is not None:
        return start

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods end today; "last-*" periods cover the whole previous
    month, year or week (Monday to Sunday).

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    if period not in PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

    start = _period_start(period.replace("-", " "), today)
    if period.startswith("this-"):
        return start, today
    if period == "last-month":
        return month_bounds(start.year, start.month)
    if period == "last-year":
        return start, date(start.year, 12, 31)
    return start, start + timedelta(days=6)
