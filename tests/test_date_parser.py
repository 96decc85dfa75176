"""Tests for date and amount parsing."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from doppik.utils.amount_parser import parse_amount
from doppik.utils.date_parser import end_of_month, parse_date, year_end


def test_parse_absolute_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_german_date():
    """Test parsing dotted German dates day first."""
    assert parse_date("03.04.2024") == date(2024, 4, 3)
    assert parse_date("1.2.24") == date(2024, 2, 1)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    result = parse_date("last month")
    today = date.today()
    if today.month == 1:
        expected = date(today.year - 1, 12, 1)
    else:
        expected = date(today.year, today.month - 1, 1)
    assert result == expected


def test_parse_this_year():
    """Test parsing 'this year'."""
    today = date.today()
    assert parse_date("this year") == date(today.year, 1, 1)


def test_parse_end_of_last_year():
    """Test parsing 'end of last year'."""
    today = date.today()
    assert parse_date("end of last year") == date(today.year - 1, 12, 31)


def test_parse_invalid():
    """Test parsing an invalid date."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing formats handled by dateutil."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_end_of_month():
    """Test month ends, including leap years."""
    assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
    assert end_of_month(date(2023, 2, 10)) == date(2023, 2, 28)
    assert end_of_month(date(2024, 12, 31)) == date(2024, 12, 31)
    assert end_of_month(date(2024, 4, 1)) == date(2024, 4, 30)


def test_year_end():
    """Test year ends."""
    assert year_end(2024) == date(2024, 12, 31)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("119.00", Decimal("119.00")),
        ("119", Decimal("119.00")),
        ("-50.5", Decimal("-50.50")),
        ("1,234.56", Decimal("1234.56")),
        ("1.234,56", Decimal("1234.56")),
        ("119,00 €", Decimal("119.00")),
        ("€ 19,5", Decimal("19.50")),
        ("1,234", Decimal("1234.00")),
        ("(42.00)", Decimal("-42.00")),
        ("", Decimal("0.00")),
        ("1.234", Decimal("1234.00")),
        ("-1.234", Decimal("-1234.00")),
        ("12.345.678", Decimal("12345678.00")),
        ("1.2300", Decimal("1.23")),
    ],
)
def test_parse_amount(text, expected):
    """Test parsing amounts with German and English separators."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["abc", "12..3", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    """Test parsing invalid amounts."""
    with pytest.raises(ValueError, match="Could not parse amount"):
        parse_amount(text)


@pytest.mark.parametrize("text", ["12.3456", "0.001", "1,234.567", "1.234,567"])
def test_parse_amount_rejects_sub_cent_digits(text):
    """Test that amounts are never silently rounded."""
    with pytest.raises(ValueError, match="more than two decimal places"):
        parse_amount(text)
