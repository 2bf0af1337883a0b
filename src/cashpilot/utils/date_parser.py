"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("all", "last-7-days", "last-month", "last-year", "current-year")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative ones: "today", "yesterday", "tomorrow", and "last/this/next"
    followed by "week", "month" or "year" (the first day of that period).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    week_start = today - timedelta(days=today.weekday())
    period_starts = {
        "week": week_start,
        "month": today.replace(day=1),
        "year": today.replace(month=1, day=1),
    }
    steps = {
        "week": relativedelta(weeks=1),
        "month": relativedelta(months=1),
        "year": relativedelta(years=1),
    }
    for prefix, direction in (("last ", -1), ("this ", 0), ("next ", 1)):
        if date_str.startswith(prefix):
            period = date_str[len(prefix):]
            if period in period_starts:
                return period_starts[period] + steps[period] * direction

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[Optional[date], Optional[date]]:
    """Get the inclusive date bounds for a named reporting period.

    Rolling periods ("last-7-days", "last-month", "last-year") only have a
    lower bound; "current-year" covers the calendar year; "all" has no bounds.
    Underscored upper-case names ("LAST_7_DAYS") are accepted too.

    Args:
        period: One of ``PERIODS``
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date); either may be None

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower().replace("_", "-")
    today = today or date.today()

    if period == "all":
        return (None, None)
    elif period == "last-7-days":
        return (today - timedelta(days=7), None)
    elif period == "last-month":
        return (today - relativedelta(months=1), None)
    elif period == "last-year":
        return (today - relativedelta(years=1), None)
    elif period == "current-year":
        return (today.replace(month=1, day=1), today.replace(month=12, day=31))
    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
