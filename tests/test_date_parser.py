"""Tests for date parser with relative dates and reporting periods."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from cashpilot.utils.date_parser import parse_date, get_date_range


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    result = parse_date("today")
    assert result == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    result = parse_date("tomorrow")
    assert result == date.today() + timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    result = parse_date("last month")
    # Should be first day of last month
    today = date.today()
    if today.month == 1:
        expected = date(today.year - 1, 12, 1)
    else:
        expected = date(today.year, today.month - 1, 1)
    assert result == expected


def test_parse_last_week():
    """Test parsing 'last week'."""
    result = parse_date("last week")
    # Should be Monday of last week (for consistency with "this week" and "next week")
    today = date.today()
    days_since_monday = today.weekday()
    expected = today - timedelta(days=days_since_monday + 7)
    assert result == expected
    # Verify it's a Monday (weekday 0)
    assert result.weekday() == 0


def test_parse_this_month():
    """Test parsing 'this month'."""
    result = parse_date("this month")
    today = date.today()
    assert result == date(today.year, today.month, 1)


def test_parse_this_year():
    """Test parsing 'this year'."""
    result = parse_date("this year")
    today = date.today()
    assert result == date(today.year, 1, 1)


def test_parse_last_year():
    """Test parsing 'last year'."""
    result = parse_date("last year")
    today = date.today()
    assert result == date(today.year - 1, 1, 1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    # These should all work via dateutil parser
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_parse_next_month():
    """Test parsing 'next month'."""
    today = date.today()
    assert parse_date("next month") == today.replace(day=1) + relativedelta(months=1)


def test_parse_is_case_insensitive():
    assert parse_date("  Today ") == date.today()


def test_get_date_range_all():
    """Test get_date_range for all: no bounds."""
    assert get_date_range("all") == (None, None)


def test_get_date_range_last_7_days():
    """Rolling periods only have a start."""
    start, end = get_date_range("last-7-days", today=date(2024, 3, 5))
    assert start == date(2024, 2, 27)
    assert end is None


def test_get_date_range_last_month():
    """Test get_date_range for last-month: one month back from today."""
    start, end = get_date_range("last-month", today=date(2024, 3, 31))
    assert start == date(2024, 2, 29)
    assert end is None


def test_get_date_range_last_year():
    """Test get_date_range for last-year: one year back from today."""
    start, end = get_date_range("last-year", today=date(2024, 2, 29))
    assert start == date(2023, 2, 28)
    assert end is None


def test_get_date_range_current_year():
    """Test get_date_range for current-year: the whole calendar year."""
    start, end = get_date_range("current-year", today=date(2024, 7, 4))
    assert start == date(2024, 1, 1)
    assert end == date(2024, 12, 31)


@pytest.mark.parametrize("period", ["LAST_7_DAYS", "Last-7-Days", "last_7_days"])
def test_get_date_range_accepts_enum_style_names(period):
    start, _ = get_date_range(period, today=date(2024, 3, 5))
    assert start == date(2024, 2, 27)


def test_get_date_range_defaults_to_today():
    start, _ = get_date_range("last-7-days")
    assert start == date.today() - timedelta(days=7)


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("invalid-period")
