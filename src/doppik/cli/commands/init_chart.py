"""Command to seed the default chart of accounts."""

import click

from doppik.domain.account import AccountService
from doppik.domain.chart import SKR03_ACCOUNTS


@click.command("init-chart")
@click.option("--force", is_flag=True, help="Add missing SKR03 accounts to an existing chart")
@click.pass_context
def init_chart(ctx, force: bool):
    """Initialize database with the SKR03 chart of accounts.

    Includes the 9000 clearing account used by year closings. Existing
    accounts are never changed; with --force, missing ones are added.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    if service.list_accounts() and not force:
        click.echo("Accounts already exist. Use --force to add missing SKR03 accounts.")
        return

    click.echo("Creating SKR03 chart of accounts...")
    created, skipped = service.seed_chart(SKR03_ACCOUNTS)

    if skipped == 0:
        click.echo(f"Successfully created {created} accounts.")
    else:
        click.echo(f"Created {created} accounts, {skipped} already existed.")


def register_commands(cli):
    """Register init-chart command with main CLI."""
    cli.add_command(init_chart)
