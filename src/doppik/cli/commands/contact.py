"""Customer and vendor commands."""

from datetime import date

import click

from doppik.cli.error_handling import handle_domain_error
from doppik.cli.resolution import format_amount, parse_date_or_exit, resolve_contact_or_exit
from doppik.domain.contact import ContactService
from doppik.domain.entities import ContactType
from doppik.domain.errors import DomainError
from doppik.domain.ledger import LedgerService


@click.group()
def contact_group():
    """Manage customers and vendors."""
    pass


@contact_group.command("create")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "contact_type",
    type=click.Choice(["customer", "vendor"], case_sensitive=False),
    required=True,
    help="Customer (debtor) or vendor (creditor)",
)
@click.option("--gl-account", help="Control account code, e.g. 1400000 or 1600000")
@click.pass_context
def create_contact(ctx, name: str, contact_type: str, gl_account: str | None):
    """Create a contact.

    Examples:
        doppik contact create "Muster GmbH" --type customer --gl-account 1400000
    """
    service = ContactService(ctx.obj["db"])
    try:
        contact_id = service.create_contact(
            name=name,
            contact_type=ContactType(contact_type.upper()),
            gl_account_code=gl_account,
        )
        click.echo(f"Created contact '{name}' (ID: {contact_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@contact_group.command("list")
@click.pass_context
def list_contacts(ctx):
    """List all contacts."""
    contacts = ContactService(ctx.obj["db"]).list_contacts()
    if not contacts:
        click.echo("No contacts found.")
        return

    click.echo("\nContacts:")
    click.echo("-" * 70)
    for contact in contacts:
        gl_account = contact.gl_account_code or "-"
        click.echo(
            f"ID: {contact.id:3d} | {contact.name:30s} | {contact.contact_type.value:8s} | {gl_account}"
        )


@contact_group.command("show")
@click.argument("contact", metavar="CONTACT")
@click.option("--as-of", help="Cut-off date (default: today)")
@click.pass_context
def show_contact(ctx, contact: str, as_of: str | None):
    """Show the open-item balance of a contact.

    CONTACT can be a contact ID or name.
    """
    db = ctx.obj["db"]
    contact_obj = resolve_contact_or_exit(ctx, ContactService(db), contact)
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date") or date.today()

    stats = LedgerService(db).get_contact_stats(contact_obj.id, as_of_date)

    click.echo(f"\n{contact_obj.name} ({contact_obj.contact_type.value})")
    click.echo(f"As of {as_of_date.isoformat()}")
    click.echo("-" * 50)
    click.echo(f"{'Opening balance':<30} {format_amount(stats.opening_balance):>18}")
    click.echo(f"{'Debit (year to date)':<30} {format_amount(stats.debit_ytd):>18}")
    click.echo(f"{'Credit (year to date)':<30} {format_amount(stats.credit_ytd):>18}")
    click.echo("-" * 50)
    click.echo(f"{'Balance':<30} {format_amount(stats.ending_balance):>18}")


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(contact_group, name="contact")
