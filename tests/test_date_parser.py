"""Tests for date and month parsing."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from constructa.utils.date_parser import (
    get_month_range,
    month_key,
    parse_date,
    parse_month,
)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_relative_dates():
    """Test parsing 'today', 'yesterday' and 'tomorrow'."""
    assert parse_date("today") == date.today()
    assert parse_date(" Yesterday ") == date.today() - timedelta(days=1)
    assert parse_date("tomorrow") == date.today() + timedelta(days=1)


def test_parse_invalid_date():
    """Test invalid date raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_parse_month():
    assert parse_month("2024-03") == "2024-03"
    assert parse_month("this month") == month_key(date.today())
    assert parse_month("last month") == month_key(date.today() - relativedelta(months=1))
    assert parse_month("next month") == month_key(date.today() + relativedelta(months=1))


@pytest.mark.parametrize("value", ["2024-3", "03-2024", "2024/03", "2024-00", "2024-13"])
def test_parse_month_invalid(value):
    with pytest.raises(ValueError, match="Could not parse month"):
        parse_month(value)


def test_month_range():
    """Test first and last day of a month, including leap February."""
    assert get_month_range("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert get_month_range("2023-12") == (date(2023, 12, 1), date(2023, 12, 31))
