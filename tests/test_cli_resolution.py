"""Tests for CLI argument helpers."""

from datetime import date
from decimal import Decimal

import click
import pytest

from doppik.cli.commands.transaction import parse_line_spec
from doppik.cli.resolution import format_amount, parse_date_or_exit


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_parse_date_or_exit_accepts_none():
    assert parse_date_or_exit(_ctx(), None, "as-of date") is None


def test_parse_date_or_exit_parses_german_dates():
    assert parse_date_or_exit(_ctx(), "31.12.2024", "as-of date") == date(2024, 12, 31)


def test_parse_date_or_exit_rejects_garbage(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        parse_date_or_exit(_ctx(), "someday", "as-of date")

    assert excinfo.value.exit_code == 1
    assert "Invalid as-of date" in capsys.readouterr().err


@pytest.mark.parametrize(
    "spec,expected",
    [
        ("1200000:119.00:", ("1200000", Decimal("119.00"), Decimal("0.00"))),
        ("8400000::100,00", ("8400000", Decimal("0.00"), Decimal("100.00"))),
        (" 1776000 : : 19 ", ("1776000", Decimal("0.00"), Decimal("19.00"))),
    ],
)
def test_parse_line_spec(spec, expected):
    assert parse_line_spec(spec) == expected


@pytest.mark.parametrize("spec", ["1200000:119", ":1:", "1200000:1:2:3", "1200000:x:"])
def test_parse_line_spec_rejects_malformed(spec):
    with pytest.raises(ValueError):
        parse_line_spec(spec)


def test_format_amount():
    assert format_amount(Decimal("1234567.5")) == "1,234,567.50"
    assert format_amount(Decimal("-200")) == "-200.00"
