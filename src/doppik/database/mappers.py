"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the calculation engine never
sees ORM objects.
"""

from decimal import Decimal

from doppik.domain import entities as domain
from doppik.database.models import (
    Account as ORMAccount,
    Contact as ORMContact,
    Transaction as ORMTransaction,
    JournalLine as ORMJournalLine,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        description=orm_account.description,
        created_at=orm_account.created_at,
    )


def contact_to_domain(orm_contact: ORMContact) -> domain.Contact:
    """Convert SQLAlchemy Contact model to domain Contact entity."""
    return domain.Contact(
        id=orm_contact.id,
        name=orm_contact.name,
        contact_type=domain.ContactType(orm_contact.contact_type),
        gl_account_code=orm_contact.gl_account_code,
        created_at=orm_contact.created_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        account_id=orm_line.account_id,
        debit=Decimal(orm_line.debit),
        credit=Decimal(orm_line.credit),
        cost_center=orm_line.cost_center,
        project=orm_line.project,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    transaction_type = None
    if orm_transaction.transaction_type is not None:
        transaction_type = domain.TransactionType(orm_transaction.transaction_type)

    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        lines=tuple(journal_line_to_domain(line) for line in orm_transaction.lines),
        transaction_type=transaction_type,
        reference=orm_transaction.reference,
        contact_id=orm_transaction.contact_id,
        invoice_id=orm_transaction.invoice_id,
        reverses_id=orm_transaction.reverses_id,
        reversal_reason=orm_transaction.reversal_reason,
        is_reversed=orm_transaction.is_reversed,
        reversed_by=orm_transaction.reversed_by,
        created_at=orm_transaction.created_at,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    """Build a new SQLAlchemy Transaction (with lines) from a domain entity."""
    transaction_type = None
    if transaction.transaction_type is not None:
        transaction_type = transaction.transaction_type.value

    return ORMTransaction(
        date=transaction.date,
        transaction_type=transaction_type,
        description=transaction.description,
        reference=transaction.reference,
        contact_id=transaction.contact_id,
        invoice_id=transaction.invoice_id,
        reverses_id=transaction.reverses_id,
        reversal_reason=transaction.reversal_reason,
        is_reversed=transaction.is_reversed,
        reversed_by=transaction.reversed_by,
        lines=[
            ORMJournalLine(
                position=position,
                account_id=line.account_id,
                debit=line.debit,
                credit=line.credit,
                cost_center=line.cost_center,
                project=line.project,
            )
            for position, line in enumerate(transaction.lines)
        ],
    )
