"""Fiscal-year closing: carry-forward entries and their cancellation.

Closing year Y books one opening-balance entry dated Y+1-01-01 that moves
the ending balance of every balance-sheet account into the new year,
against the clearing account (SKR03 9000 "Saldenvorträge"). Cancelling a
closing books the same entry with debit and credit swapped; afterwards the
closing can be run again.
"""

import os
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from doppik.database.base import Database
from doppik.domain.entities import (
    BALANCE_TOLERANCE,
    ZERO,
    Account,
    AccountBalance,
    ClosingPreview,
    ClosingState,
    JournalLine,
    Transaction,
    TransactionType,
)
from doppik.domain.errors import (
    ConflictError,
    MissingAccountError,
    NotFoundError,
    ValidationError,
    closing_already_booked,
    closing_not_booked,
    opening_balance_exists,
)
from doppik.domain.ledger import (
    account_stats,
    closing_reference,
    find_active_closing,
    opening_entries,
)
from doppik.domain.transaction import TransactionService
from doppik.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_CLEARING_PREFIX = "9000"
CANCELLATION_PREFIX = "STORNO-"


def clearing_account_prefix(prefix: Optional[str] = None) -> str:
    """Code prefix of the clearing account.

    Args:
        prefix: Explicit prefix. If None, DOPPIK_CLEARING_ACCOUNT is used when
            set, otherwise "9000".
    """
    if prefix is None:
        prefix = os.environ.get("DOPPIK_CLEARING_ACCOUNT") or DEFAULT_CLEARING_PREFIX
    return prefix.strip()


def is_clearing_account(account: Account, prefix: str = DEFAULT_CLEARING_PREFIX) -> bool:
    return account.code.startswith(prefix)


def find_clearing_account(
    accounts: Sequence[Account], prefix: str = DEFAULT_CLEARING_PREFIX
) -> Account:
    """Return the carry-forward clearing account.

    Raises:
        MissingAccountError: If no account code starts with ``prefix``
    """
    for account in sorted(accounts, key=lambda acc: acc.code):
        if is_clearing_account(account, prefix):
            return account
    raise MissingAccountError(prefix, "Saldenvorträge clearing account")


def closing_balances(
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    closing_year: int,
    prefix: str = DEFAULT_CLEARING_PREFIX,
) -> tuple[AccountBalance, ...]:
    """Non-zero ending balances of the balance-sheet accounts on Y-12-31."""
    as_of = date(closing_year, 12, 31)
    balances = []
    for account in sorted(accounts, key=lambda acc: acc.code):
        if not account.account_type.is_balance_sheet or is_clearing_account(account, prefix):
            continue
        balance = account_stats(account, journal, as_of).ending_balance
        if abs(balance) < BALANCE_TOLERANCE:
            continue
        balances.append(AccountBalance(account=account, balance=balance))
    return tuple(balances)


def _carry_forward_lines(item: AccountBalance, clearing: Account) -> tuple[JournalLine, JournalLine]:
    amount = abs(item.balance)
    # A positive balance goes on the account's natural side.
    on_debit = item.account.account_type.is_debit_natural == (item.balance > ZERO)
    if on_debit:
        return (
            JournalLine(account_id=item.account.id, debit=amount),
            JournalLine(account_id=clearing.id, credit=amount),
        )
    return (
        JournalLine(account_id=item.account.id, credit=amount),
        JournalLine(account_id=clearing.id, debit=amount),
    )


def build_closing_entry(
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    closing_year: int,
    prefix: str = DEFAULT_CLEARING_PREFIX,
) -> Transaction:
    """Build the (unsaved) carry-forward entry that closes ``closing_year``.

    Raises:
        MissingAccountError: If the clearing account is missing
    """
    clearing = find_clearing_account(accounts, prefix)
    lines: list[JournalLine] = []
    for item in closing_balances(journal, accounts, closing_year, prefix):
        lines.extend(_carry_forward_lines(item, clearing))

    opening_year = closing_year + 1
    return Transaction(
        id=None,
        date=date(opening_year, 1, 1),
        description=f"Saldenvortrag aus {closing_year}",
        lines=tuple(lines),
        transaction_type=TransactionType.OPENING_BALANCE,
        reference=closing_reference(opening_year),
    )


def preview_closing(
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    closing_year: int,
    prefix: str = DEFAULT_CLEARING_PREFIX,
) -> ClosingPreview:
    """Summarise what closing ``closing_year`` would carry forward.

    The totals cover the account side of the entry; the clearing account
    takes the opposite amounts.
    """
    clearing = find_clearing_account(accounts, prefix)
    balances = closing_balances(journal, accounts, closing_year, prefix)
    total_debit = total_credit = ZERO
    for item in balances:
        debit_line, credit_line = _carry_forward_lines(item, clearing)
        if debit_line.account_id == item.account.id:
            total_debit += debit_line.debit
        else:
            total_credit += credit_line.credit
    return ClosingPreview(
        closing_year=closing_year,
        clearing_account=clearing,
        balances=balances,
        total_debit=total_debit,
        total_credit=total_credit,
    )


def build_closing_reversal(opening: Transaction) -> Transaction:
    """Build the (unsaved) cancellation of a carry-forward entry."""
    lines = tuple(
        JournalLine(
            account_id=line.account_id,
            debit=line.credit,
            credit=line.debit,
            cost_center=line.cost_center,
            project=line.project,
        )
        for line in opening.lines
    )
    return Transaction(
        id=None,
        date=opening.date,
        description=f"Storno Saldenvortrag aus {opening.date.year - 1}",
        lines=lines,
        transaction_type=TransactionType.CORRECTION,
        reference=f"{CANCELLATION_PREFIX}{opening.reference or opening.id}",
        reverses_id=opening.id,
    )


class ClosingService:
    """Service running the closing workflow against the stored journal.

    Per closing year the workflow moves NOT_PREPARED -> PREVIEWED -> BOOKED.
    A preview is held by the service instance and is required before
    booking; cancelling a booked closing returns the year to NOT_PREPARED.
    """

    def __init__(self, db: Database, clearing_prefix: Optional[str] = None):
        """Initialize closing service.

        Args:
            db: Database instance
            clearing_prefix: Code prefix of the clearing account (defaults to
                DOPPIK_CLEARING_ACCOUNT or "9000")
        """
        self.db = db
        self.clearing_prefix = clearing_account_prefix(clearing_prefix)
        self.transactions = TransactionService(db)
        self._previews: dict[int, ClosingPreview] = {}

    def _load(self) -> tuple[list[Transaction], list[Account]]:
        return self.db.list_transactions(), self.db.list_accounts()

    def active_closing(self, closing_year: int) -> Optional[Transaction]:
        """Return the booked carry-forward entry for ``closing_year``, if any."""
        journal, _ = self._load()
        return find_active_closing(journal, closing_year + 1)

    def state(self, closing_year: int) -> ClosingState:
        """Get the workflow state of a closing year."""
        if self.active_closing(closing_year) is not None:
            return ClosingState.BOOKED
        if closing_year in self._previews:
            return ClosingState.PREVIEWED
        return ClosingState.NOT_PREPARED

    def preview(self, closing_year: int) -> ClosingPreview:
        """Compute the closing of a year without booking it.

        Raises:
            MissingAccountError: If the clearing account is missing
        """
        journal, accounts = self._load()
        preview = preview_closing(journal, accounts, closing_year, self.clearing_prefix)
        self._previews[closing_year] = preview
        return preview

    def book(self, closing_year: int) -> int:
        """Book the previewed closing of a year.

        Returns:
            ID of the carry-forward transaction

        Raises:
            ValidationError: If the year was not previewed or has nothing to
                carry forward
            ConflictError: If the year is already closed, the next year already
                has an opening balance entry, or the journal changed since the
                preview
            MissingAccountError: If the clearing account is missing
        """
        previewed = self._previews.get(closing_year)
        if previewed is None:
            raise ValidationError(f"Preview the closing for {closing_year} before booking it")

        journal, accounts = self._load()
        existing = find_active_closing(journal, closing_year + 1)
        if existing is not None:
            raise ConflictError(closing_already_booked(closing_year, existing.reference or ""))
        manual = opening_entries(journal, closing_year + 1)
        if manual:
            raise ConflictError(
                opening_balance_exists(closing_year + 1, [txn.id for txn in manual])
            )

        current = preview_closing(journal, accounts, closing_year, self.clearing_prefix)
        if current != previewed:
            self._previews[closing_year] = current
            raise ConflictError(
                f"Balances for {closing_year} changed since the preview. Review them and book again."
            )
        if not current.balances:
            raise ValidationError(f"No balances to carry forward from {closing_year}")

        entry = build_closing_entry(journal, accounts, closing_year, self.clearing_prefix)
        transaction_id = self.transactions.record(entry)
        del self._previews[closing_year]
        logger.info(
            "Closed %d: %s booked as transaction %s (%d accounts, %.2f / %.2f)",
            closing_year,
            entry.reference,
            transaction_id,
            len(current.balances),
            current.total_debit,
            current.total_credit,
        )
        return transaction_id

    def cancel(self, closing_year: int) -> int:
        """Cancel the booked closing of a year.

        Returns:
            ID of the cancellation transaction

        Raises:
            NotFoundError: If no closing is booked for the year
        """
        opening = self.active_closing(closing_year)
        if opening is None:
            raise NotFoundError(closing_not_booked(closing_year))

        cancellation_id = self.transactions.record_reversal(build_closing_reversal(opening))
        self._previews.pop(closing_year, None)
        logger.info(
            "Cancelled closing %d: %s reversed by transaction %s",
            closing_year,
            opening.reference,
            cancellation_id,
        )
        return cancellation_id

    @staticmethod
    def balance_difference(preview: ClosingPreview) -> Decimal:
        """Debit minus credit side of the account lines of a preview."""
        return preview.total_debit - preview.total_credit
