"""Utility functions for doppik."""

from doppik.utils.date_parser import parse_date
from doppik.utils.amount_parser import parse_amount
from doppik.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "resolve_account"]
