"""Date parsing utilities."""

import re
from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_GERMAN_DATE = re.compile(r"^\d{1,2}\.\d{1,2}\.\d{2,4}$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - German dates: "15.01.2024" (day first)
    - Other formats understood by dateutil: "January 15, 2024"
    - Relative dates: "today", "yesterday", "this month", "last month",
      "this year", "last year", "end of last year"

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
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
        "end of last year": today.replace(month=1, day=1) - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        if _GERMAN_DATE.match(date_str):
            return date_parser.parse(date_str, dayfirst=True).date()
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def end_of_month(value: date) -> date:
    """Last day of the month of ``value``."""
    return value + relativedelta(day=31)


def year_end(year: int) -> date:
    """December 31 of ``year``."""
    return date(year, 12, 31)
