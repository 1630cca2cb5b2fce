"""Date and month parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative forms "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

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

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> str:
    """Normalize a month string to YYYY-MM.

    Accepts "2024-03" as well as "this month", "last month" and
    "next month".

    Raises:
        ValueError: If the month cannot be parsed
    """
    month_str = month_str.strip().lower()
    today = date.today()

    relative_months = {
        "this month": today,
        "last month": today - relativedelta(months=1),
        "next month": today + relativedelta(months=1),
    }
    if month_str in relative_months:
        return month_key(relative_months[month_str])

    match = MONTH_PATTERN.match(month_str)
    if match is None:
        raise ValueError(f"Could not parse month '{month_str}': expected YYYY-MM")

    month = int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month out of range")
    return month_str


def month_key(value: date) -> str:
    """Return the YYYY-MM key of a date."""
    return value.strftime("%Y-%m")


def get_month_range(month: str) -> tuple[date, date]:
    """Get the first and last day of a YYYY-MM month.

    Raises:
        ValueError: If the month string is malformed
    """
    month = parse_month(month)
    year, mon = (int(part) for part in month.split("-"))
    start_date = date(year, mon, 1)
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)
    return (start_date, end_date)
