"""Reporting commands: trial balance, profit and loss, balance sheet."""

from datetime import date

import click

from doppik.cli.error_handling import handle_domain_error
from doppik.cli.resolution import format_amount, parse_date_or_exit
from doppik.domain.entities import StatementLine, YearData
from doppik.domain.errors import DomainError
from doppik.domain.ledger import LedgerService
from doppik.domain.statements import StatementService


def _echo_statement_lines(lines: list[StatementLine], label_width: int = 56) -> None:
    for line in lines:
        indent = "    " * line.level
        label = f"{indent}{line.node.label}"[:label_width]
        click.echo(
            f"{label:<{label_width}} {format_amount(line.amount):>16} "
            f"{format_amount(line.previous_amount):>16}"
        )


def _echo_header(title: str, data: YearData, label_width: int = 56) -> None:
    click.echo(f"\n{title} {data.year} (as of {data.as_of.isoformat()})")
    click.echo("=" * 90)
    click.echo(f"{'':<{label_width}} {str(data.year):>16} {str(data.year - 1):>16}")
    click.echo("-" * 90)


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("trial-balance")
@click.option("--as-of", help="Cut-off date (default: today)")
@click.pass_context
def trial_balance(ctx, as_of: str | None):
    """Show the trial balance (Summen- und Saldenliste)."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date") or date.today()
    rows = LedgerService(ctx.obj["db"]).get_trial_balance(as_of_date)
    if not rows:
        click.echo("No balances found.")
        return

    click.echo(f"\nTrial balance as of {as_of_date.isoformat()}")
    click.echo("-" * 120)
    click.echo(
        f"{'Account':<9} {'Name':<36} {'Opening':>14} {'Debit month':>14} "
        f"{'Debit YTD':>14} {'Credit YTD':>14} {'Ending':>14}"
    )
    click.echo("-" * 120)
    for account, stats in rows:
        click.echo(
            f"{account.code:<9} {account.name[:36]:<36} {format_amount(stats.opening_balance):>14} "
            f"{format_amount(stats.debit_month):>14} {format_amount(stats.debit_ytd):>14} "
            f"{format_amount(stats.credit_ytd):>14} {format_amount(stats.ending_balance):>14}"
        )
    click.echo("-" * 120)
    total_debit = sum(stats.debit_ytd for _, stats in rows)
    total_credit = sum(stats.credit_ytd for _, stats in rows)
    click.echo(
        f"{'TOTAL':<46} {'':>14} {'':>14} {format_amount(total_debit):>14} "
        f"{format_amount(total_credit):>14}"
    )


@report_group.command("profit-loss")
@click.option("--year", type=int, required=True, help="Fiscal year")
@click.option("--as-of", help="Cut-off date inside the year (default: Dec 31)")
@click.pass_context
def profit_loss(ctx, year: int, as_of: str | None):
    """Show the profit and loss statement (GuV) with prior-year figures."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    try:
        data, lines = StatementService(ctx.obj["db"]).profit_and_loss(year, as_of_date)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_header("Profit and loss", data)
    _echo_statement_lines(lines)
    click.echo("-" * 90)
    click.echo(f"{'Net result':<56} {format_amount(data.net_result):>16}")


@report_group.command("balance-sheet")
@click.option("--year", type=int, required=True, help="Fiscal year")
@click.option("--as-of", help="Cut-off date inside the year (default: Dec 31)")
@click.pass_context
def balance_sheet(ctx, year: int, as_of: str | None):
    """Show the balance sheet (Bilanz) with prior-year figures."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    try:
        data, assets, liabilities = StatementService(ctx.obj["db"]).balance_sheet(
            year, as_of_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_header("Balance sheet", data)
    click.echo("AKTIVA")
    _echo_statement_lines(assets)
    click.echo("-" * 90)
    click.echo(f"{'Total assets':<56} {format_amount(data.sum_assets):>16}")
    click.echo("")
    click.echo("PASSIVA")
    _echo_statement_lines(liabilities)
    click.echo("-" * 90)
    click.echo(
        f"{'Total liabilities and equity':<56} "
        f"{format_amount(data.sum_liabilities_and_equity):>16}"
    )

    if not data.is_balanced:
        click.echo(
            f"Warning: balance sheet does not balance (difference {format_amount(data.difference)})",
            err=True,
        )


@report_group.command("category")
@click.argument("category_id", metavar="CATEGORY")
@click.option("--year", type=int, required=True, help="Fiscal year")
@click.option("--as-of", help="Cut-off date inside the year (default: Dec 31)")
@click.pass_context
def category_detail(ctx, category_id: str, year: int, as_of: str | None):
    """List the accounts behind one statement line, e.g. act_B_III."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    try:
        rows = StatementService(ctx.obj["db"]).get_category_accounts(
            category_id, year, as_of_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo(f"No accounts with a balance in {category_id}.")
        return

    click.echo(f"\n{category_id} {year}")
    click.echo("-" * 70)
    for row in rows:
        click.echo(f"{row.account.code:<9} {row.account.name[:40]:<40} {format_amount(row.balance):>16}")
    click.echo("-" * 70)
    click.echo(f"{'TOTAL':<50} {format_amount(sum(row.balance for row in rows)):>16}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
