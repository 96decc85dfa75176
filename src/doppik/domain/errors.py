"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class UnbalancedTransactionError(ValidationError):
    """Transaction whose debits and credits do not match."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(transaction_unbalanced(total_debit, total_credit))


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class MissingAccountError(NotFoundError):
    """An account required by an operation is missing from the chart."""

    def __init__(self, account_ref: str, purpose: str):
        self.account_ref = account_ref
        self.purpose = purpose
        super().__init__(required_account_missing(account_ref, purpose))


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or work already done."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account with code '{code}' not found"


def duplicate_account_code(code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account with code '{code}' already exists"


def contact_not_found(contact_id: int) -> str:
    """Return message for missing contact."""
    return f"Contact {contact_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def transaction_unbalanced(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for a transaction whose sides differ."""
    return (
        f"Transaction is not balanced: debit {total_debit:.2f} "
        f"!= credit {total_credit:.2f} (difference {total_debit - total_credit:.2f})"
    )


def required_account_missing(account_ref: str, purpose: str) -> str:
    """Return message for an account an operation cannot run without."""
    return f"Account {account_ref} ({purpose}) is missing from the chart of accounts"


def account_type_locked(account_code: str, line_count: int) -> str:
    """Return message when an account type change is blocked by postings."""
    return (
        f"Cannot change type of account {account_code}: it has {line_count} "
        f"posting{'s' if line_count != 1 else ''}. Create a new account instead."
    )


def transaction_already_reversed(transaction_id: int, reversed_by: int | None) -> str:
    """Return message for a second reversal attempt."""
    suffix = f" by transaction {reversed_by}" if reversed_by is not None else ""
    return f"Transaction {transaction_id} has already been reversed{suffix}"


def closing_already_booked(closing_year: int, reference: str) -> str:
    """Return message when a closing for the year already exists."""
    return (
        f"Closing for {closing_year} already booked ({reference}). "
        f"Cancel it before running it again."
    )


def opening_balance_exists(opening_year: int, transaction_ids: list[int]) -> str:
    """Return message when the year to open already has an opening entry."""
    ids = ", ".join(str(txn_id) for txn_id in transaction_ids)
    return (
        f"{opening_year} already has an opening balance entry (transaction {ids}). "
        f"Reverse it before booking the closing."
    )


def closing_not_booked(closing_year: int) -> str:
    """Return message when there is no closing to cancel."""
    return f"No closing booked for {closing_year}"
