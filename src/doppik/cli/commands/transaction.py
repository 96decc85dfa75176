"""Journal commands."""

from decimal import Decimal

import click

from doppik.cli.error_handling import handle_domain_error
from doppik.cli.resolution import (
    format_amount,
    parse_date_or_exit,
    resolve_account_or_exit,
    resolve_contact_or_exit,
)
from doppik.domain.account import AccountService
from doppik.domain.contact import ContactService
from doppik.domain.entities import JournalLine, TransactionType
from doppik.domain.errors import DomainError
from doppik.domain.reversal import STORNO_REASONS, ReversalService
from doppik.domain.transaction import TransactionService
from doppik.utils.amount_parser import parse_amount


def parse_line_spec(spec: str) -> tuple[str, Decimal, Decimal]:
    """Split a CODE:DEBIT:CREDIT line argument.

    Either amount may be left empty, e.g. "1200000:119.00:" or
    "8400000::100.00".

    Raises:
        ValueError: If the argument is malformed
    """
    parts = spec.split(":")
    if len(parts) != 3 or not parts[0].strip():
        raise ValueError(f"Line '{spec}' must look like CODE:DEBIT:CREDIT")
    code, debit, credit = parts
    return code.strip(), parse_amount(debit), parse_amount(credit)


def _parse_lines(ctx, param, value):
    try:
        return [parse_line_spec(spec) for spec in value]
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
def transaction_group():
    """Book and inspect journal transactions."""
    pass


@transaction_group.command("add")
@click.option("--date", "date_str", required=True, help="Booking date (YYYY-MM-DD or DD.MM.YYYY)")
@click.option("--description", required=True, help="Booking text")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    callback=_parse_lines,
    help="Journal line as CODE:DEBIT:CREDIT (repeat for each line)",
)
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Transaction kind",
)
@click.option("--reference", help="Document reference, e.g. invoice number")
@click.option("--contact", help="Customer or vendor (ID or name)")
@click.option("--invoice", "invoice_id", help="Originating invoice ID")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    description: str,
    lines: list[tuple[str, Decimal, Decimal]],
    transaction_type: str | None,
    reference: str | None,
    contact: str | None,
    invoice_id: str | None,
):
    """Book a balanced transaction.

    Examples:
        doppik transaction add --date 2024-03-10 --description "Rechnung 1001" \\
            --line 1200000:119.00: --line 8400000::100.00 --line 1776000::19.00
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)

    booking_date = parse_date_or_exit(ctx, date_str, "date")
    journal_lines = []
    for code, debit, credit in lines:
        account = resolve_account_or_exit(ctx, account_service, code)
        journal_lines.append(JournalLine(account_id=account.id, debit=debit, credit=credit))

    contact_id = None
    if contact is not None:
        contact_id = resolve_contact_or_exit(ctx, ContactService(db), contact).id

    try:
        transaction_id = TransactionService(db).create_transaction(
            date=booking_date,
            description=description,
            lines=journal_lines,
            transaction_type=TransactionType(transaction_type.upper()) if transaction_type else None,
            reference=reference,
            contact_id=contact_id,
            invoice_id=invoice_id,
        )
        click.echo(f"Booked transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--account", help="Only transactions touching this account (code or ID)")
@click.pass_context
def list_transactions(ctx, start_date: str | None, end_date: str | None, account: str | None):
    """List journal transactions in booking order."""
    db = ctx.obj["db"]
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account).id

    transactions = TransactionService(db).list_transactions(
        start_date=start, end_date=end, account_id=account_id
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Reference':<16} {'Type':<16} {'Amount':>14}  {'Description':<40}"
    )
    click.echo("-" * 110)
    for txn in transactions:
        kind = txn.transaction_type.value if txn.transaction_type else ""
        marker = " (reversed)" if txn.is_reversed else ""
        description = (txn.description or "")[:40]
        click.echo(
            f"{txn.id:<6} {txn.date.isoformat():<12} {(txn.reference or ''):<16} {kind:<16} "
            f"{format_amount(txn.total_debit):>14}  {description}{marker}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction with its lines."""
    db = ctx.obj["db"]
    try:
        txn = TransactionService(db).require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    accounts = {acc.id: acc for acc in AccountService(db).list_accounts()}

    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date.isoformat()}")
    click.echo(f"  Description: {txn.description}")
    if txn.transaction_type:
        click.echo(f"  Type: {txn.transaction_type.value}")
    if txn.reference:
        click.echo(f"  Reference: {txn.reference}")
    if txn.contact_id is not None:
        click.echo(f"  Contact ID: {txn.contact_id}")
    if txn.invoice_id:
        click.echo(f"  Invoice: {txn.invoice_id}")
    if txn.reverses_id is not None:
        click.echo(f"  Reverses: {txn.reverses_id}")
    if txn.reversal_reason:
        click.echo(f"  Reason: {txn.reversal_reason}")
    if txn.is_reversed:
        click.echo(f"  Reversed by: {txn.reversed_by}")

    click.echo("-" * 80)
    click.echo(f"{'Account':<9} {'Name':<40} {'Debit':>14} {'Credit':>14}")
    click.echo("-" * 80)
    for line in txn.lines:
        account = accounts.get(line.account_id)
        code = account.code if account else str(line.account_id)
        name = account.name[:40] if account else "Unknown"
        click.echo(
            f"{code:<9} {name:<40} {format_amount(line.debit):>14} {format_amount(line.credit):>14}"
        )
    click.echo("-" * 80)
    click.echo(
        f"{'TOTAL':<50} {format_amount(txn.total_debit):>14} {format_amount(txn.total_credit):>14}"
    )


@transaction_group.command("reverse")
@click.argument("transaction_id", type=int)
@click.option(
    "--reason",
    required=True,
    help=f"Why the transaction is reversed, e.g. {', '.join(repr(r) for r in STORNO_REASONS[:2])}",
)
@click.option("--date", "date_str", help="Booking date of the reversal (default: original date)")
@click.pass_context
def reverse_transaction(ctx, transaction_id: int, reason: str, date_str: str | None):
    """Reverse a transaction (Generalstorno).

    The reversal repeats every line with negated amounts, so the original
    stays in the journal and both show up in the turnover.
    """
    db = ctx.obj["db"]
    reversal_date = parse_date_or_exit(ctx, date_str, "date")
    try:
        reversal_id = ReversalService(db).reverse(transaction_id, reason, reversal_date)
        click.echo(f"Reversed transaction {transaction_id} by transaction {reversal_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
