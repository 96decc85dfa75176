"""CLI helpers that turn command line arguments into domain values or exit."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from doppik.cli.error_handling import handle_domain_error
from doppik.domain.account import AccountService
from doppik.domain.contact import ContactService
from doppik.domain.entities import Account, Contact
from doppik.domain.errors import DomainError
from doppik.utils.account_resolver import resolve_account
from doppik.utils.date_parser import parse_date


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> Account:
    """Resolve account code or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_contact_or_exit(
    ctx: click.Context, contact_service: ContactService, contact: str
) -> Contact:
    """Resolve contact ID or name, or exit with a CLI error."""
    try:
        return contact_service.resolve(contact)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse an optional date option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"
