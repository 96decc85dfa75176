"""Main CLI entry point."""

import click

from doppik.database.factories import create_sqlite_database
from doppik.logging_setup import configure_logging

# Import and register all commands at module level
from doppik.cli.commands import (
    account,
    closing,
    contact,
    init_chart,
    report,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DOPPIK_DB_PATH environment variable)",
    envvar="DOPPIK_DB_PATH",
)
@click.option(
    "--log-level",
    help="Log level, e.g. INFO or DEBUG (overrides DOPPIK_LOG_LEVEL, default WARNING)",
    envvar="DOPPIK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Doppik - double-entry bookkeeping.

    Keep a journal of balanced transactions over an SKR03 chart of accounts
    and derive ledgers, profit and loss, balance sheet and year closings.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # A bare `doppik` only prints help and must not create a ledger file
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
init_chart.register_commands(cli)
account.register_commands(cli)
contact.register_commands(cli)
transaction.register_commands(cli)
report.register_commands(cli)
closing.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
