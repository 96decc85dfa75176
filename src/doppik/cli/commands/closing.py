"""Year closing commands."""

import click

from doppik.cli.error_handling import handle_domain_error
from doppik.cli.resolution import format_amount
from doppik.domain.closing import ClosingService
from doppik.domain.entities import ClosingPreview
from doppik.domain.errors import DomainError


def _echo_preview(preview: ClosingPreview) -> None:
    click.echo(
        f"\nClosing {preview.closing_year}: carry forward into {preview.opening_year} "
        f"against {preview.clearing_account.code} {preview.clearing_account.name}"
    )
    if not preview.balances:
        click.echo("No balances to carry forward.")
        return

    click.echo("-" * 80)
    click.echo(f"{'Account':<9} {'Name':<40} {'Type':<10} {'Balance':>16}")
    click.echo("-" * 80)
    for item in preview.balances:
        click.echo(
            f"{item.account.code:<9} {item.account.name[:40]:<40} "
            f"{item.account.account_type.value:<10} {format_amount(item.balance):>16}"
        )
    click.echo("-" * 80)
    click.echo(f"{'Debit total':<61} {format_amount(preview.total_debit):>16}")
    click.echo(f"{'Credit total':<61} {format_amount(preview.total_credit):>16}")
    click.echo(
        f"{'Difference (retained result)':<61} "
        f"{format_amount(ClosingService.balance_difference(preview)):>16}"
    )


@click.group()
def closing_group():
    """Close fiscal years (Jahresabschluss)."""
    pass


@closing_group.command("status")
@click.argument("year", type=int)
@click.pass_context
def closing_status(ctx, year: int):
    """Show whether a year has been closed."""
    service = ClosingService(ctx.obj["db"])
    opening = service.active_closing(year)
    if opening is None:
        click.echo(f"{year}: not closed")
        return
    click.echo(
        f"{year}: closed ({opening.reference}, transaction {opening.id}, "
        f"dated {opening.date.isoformat()})"
    )


@closing_group.command("preview")
@click.argument("year", type=int)
@click.pass_context
def closing_preview(ctx, year: int):
    """Show the balances a closing of YEAR would carry forward."""
    try:
        preview = ClosingService(ctx.obj["db"]).preview(year)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_preview(preview)


@closing_group.command("book")
@click.argument("year", type=int)
@click.option("--yes", is_flag=True, help="Book without asking for confirmation")
@click.pass_context
def closing_book(ctx, year: int, yes: bool):
    """Close YEAR by booking the opening balances of the next year."""
    service = ClosingService(ctx.obj["db"])
    try:
        preview = service.preview(year)
        _echo_preview(preview)
        if not yes and not click.confirm(f"Book the closing for {year}?"):
            click.echo("Closing cancelled.")
            return
        transaction_id = service.book(year)
        click.echo(f"Booked closing for {year} as transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@closing_group.command("cancel")
@click.argument("year", type=int)
@click.option("--yes", is_flag=True, help="Cancel without asking for confirmation")
@click.pass_context
def closing_cancel(ctx, year: int, yes: bool):
    """Cancel the closing of YEAR so it can be run again."""
    service = ClosingService(ctx.obj["db"])
    if not yes and not click.confirm(f"Cancel the closing for {year}?"):
        click.echo("Nothing changed.")
        return
    try:
        cancellation_id = service.cancel(year)
        click.echo(f"Cancelled closing for {year} (transaction {cancellation_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register closing commands with main CLI."""
    cli.add_command(closing_group, name="closing")
