"""CLI error handling helpers."""

import click

from doppik.domain.errors import DomainError, MissingAccountError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print a domain error to stderr and exit with status 1.

    A missing chart account gets a hint, since the usual cause is a
    database that was never seeded.
    """
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, MissingAccountError):
        click.echo("Hint: 'doppik init-chart --force' adds the missing SKR03 accounts.", err=True)
    ctx.exit(1)
