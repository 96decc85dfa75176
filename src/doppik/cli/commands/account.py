"""Chart of accounts commands."""

from datetime import date

import click

from doppik.cli.error_handling import handle_domain_error
from doppik.cli.resolution import format_amount, parse_date_or_exit, resolve_account_or_exit
from doppik.domain.account import AccountService
from doppik.domain.entities import AccountType
from doppik.domain.errors import DomainError
from doppik.domain.ledger import LedgerService

ACCOUNT_TYPES = click.Choice([t.value for t in AccountType], case_sensitive=False)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, required=True, help="Account type")
@click.option("--description", help="Optional description")
@click.pass_context
def create_account(ctx, code: str, name: str, account_type: str, description: str | None):
    """Create a new account.

    Examples:
        doppik account create 1200000 "Bank (Girokonto)" --type asset
        doppik account create 8400000 "Erlöse 19% USt" --type revenue
    """
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(
            code=code,
            name=name,
            account_type=AccountType(account_type.upper()),
            description=description,
        )
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, help="Only accounts of this type")
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List all accounts ordered by code."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if account_type is not None:
        accounts = [acc for acc in accounts if acc.account_type.value == account_type.upper()]
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(f"{acc.code:<9} {acc.name:<50} {acc.account_type.value:<10} (ID: {acc.id})")


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Cut-off date (default: today)")
@click.pass_context
def show_account(ctx, account: str, as_of: str | None):
    """Show the ledger stats of an account.

    ACCOUNT can be an account code or ID.
    """
    db = ctx.obj["db"]
    account_obj = resolve_account_or_exit(ctx, AccountService(db), account)
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date") or date.today()

    stats = LedgerService(db).get_account_stats(account_obj.id, as_of_date)

    click.echo(f"\n{account_obj.code} {account_obj.name} ({account_obj.account_type.value})")
    click.echo(f"As of {as_of_date.isoformat()}")
    click.echo("-" * 50)
    click.echo(f"{'Opening balance':<30} {format_amount(stats.opening_balance):>18}")
    click.echo(f"{'Debit (month)':<30} {format_amount(stats.debit_month):>18}")
    click.echo(f"{'Credit (month)':<30} {format_amount(stats.credit_month):>18}")
    click.echo(f"{'Debit (year to date)':<30} {format_amount(stats.debit_ytd):>18}")
    click.echo(f"{'Credit (year to date)':<30} {format_amount(stats.credit_ytd):>18}")
    click.echo("-" * 50)
    click.echo(f"{'Ending balance':<30} {format_amount(stats.ending_balance):>18}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--description", help="New description (optional)")
@click.pass_context
def rename_account(ctx, account: str, new_name: str, description: str | None) -> None:
    """Rename an account.

    ACCOUNT can be an account code or ID.
    """
    service = AccountService(ctx.obj["db"])
    account_obj = resolve_account_or_exit(ctx, service, account)
    try:
        service.rename_account(account_obj.id, name=new_name, description=description)
        click.echo(f"Renamed account {account_obj.code} to '{new_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("set-type")
@click.argument("account", metavar="ACCOUNT")
@click.argument("account_type", metavar="TYPE", type=ACCOUNT_TYPES)
@click.pass_context
def set_account_type(ctx, account: str, account_type: str) -> None:
    """Change the type of an account without postings.

    ACCOUNT can be an account code or ID.
    """
    service = AccountService(ctx.obj["db"])
    account_obj = resolve_account_or_exit(ctx, service, account)
    try:
        service.change_account_type(account_obj.id, AccountType(account_type.upper()))
        click.echo(f"Account {account_obj.code} is now {account_type.upper()}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
