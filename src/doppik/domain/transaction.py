"""Journal (transaction) domain service."""

from datetime import date
from typing import Iterable, Optional

from doppik.database.base import Database
from doppik.domain.entities import (
    ZERO,
    JournalLine,
    Transaction as TransactionEntity,
    TransactionType,
)
from doppik.domain.errors import (
    MissingAccountError,
    NotFoundError,
    UnbalancedTransactionError,
    ValidationError,
    contact_not_found,
    transaction_not_found,
)
from doppik.logging_setup import get_logger

logger = get_logger(__name__)


def validate_transaction(transaction: TransactionEntity, account_ids: set[int]) -> None:
    """Check a transaction before it is stored.

    Args:
        transaction: Transaction to check
        account_ids: IDs of all accounts in the chart

    Raises:
        ValidationError: If the transaction is structurally invalid
        MissingAccountError: If a line references an unknown account
        UnbalancedTransactionError: If debits and credits differ
    """
    if not transaction.description or not transaction.description.strip():
        raise ValidationError("Transaction description must not be empty")
    if len(transaction.lines) < 2:
        raise ValidationError("A transaction needs at least two lines")

    # Only a Generalstorno carries negated amounts.
    allow_negative = transaction.transaction_type is TransactionType.REVERSAL
    for position, line in enumerate(transaction.lines, start=1):
        if line.account_id not in account_ids:
            raise MissingAccountError(str(line.account_id), f"line {position}")
        if not allow_negative and (line.debit < ZERO or line.credit < ZERO):
            raise ValidationError(f"Line {position} has a negative amount")
        if line.debit == ZERO and line.credit == ZERO:
            raise ValidationError(f"Line {position} has neither debit nor credit")

    if not transaction.is_balanced:
        raise UnbalancedTransactionError(transaction.total_debit, transaction.total_credit)


class TransactionService:
    """Service for appending to and reading the journal."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        date: date,
        description: str,
        lines: Iterable[JournalLine],
        transaction_type: Optional[TransactionType] = None,
        reference: Optional[str] = None,
        contact_id: Optional[int] = None,
        invoice_id: Optional[str] = None,
    ) -> int:
        """Create and store a balanced transaction.

        Args:
            date: Booking date
            description: Booking text
            lines: Journal lines (at least two)
            transaction_type: Optional kind tag
            reference: Optional document reference
            contact_id: Optional customer or vendor
            invoice_id: Optional originating invoice

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the transaction is invalid
            UnbalancedTransactionError: If debits and credits differ
            NotFoundError: If the contact doesn't exist
        """
        transaction = TransactionEntity(
            id=None,
            date=date,
            description=description.strip(),
            lines=tuple(lines),
            transaction_type=transaction_type,
            reference=reference,
            contact_id=contact_id,
            invoice_id=invoice_id,
        )
        return self.record(transaction)

    def record(self, transaction: TransactionEntity) -> int:
        """Validate and append a transaction built elsewhere.

        Closing and reversal engines build unsaved transactions
        (``id`` is None); this is the single path into the journal.

        Returns:
            Transaction ID
        """
        self._check_new(transaction)
        transaction_id = self.db.create_transaction(transaction)
        self._log_booked(transaction_id, transaction)
        return transaction_id

    def record_reversal(self, transaction: TransactionEntity) -> int:
        """Append a transaction that reverses ``transaction.reverses_id``.

        The new entry and the link on the original are stored together.

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the reversed transaction doesn't exist
            ConflictError: If it has already been reversed
        """
        if transaction.reverses_id is None:
            raise ValidationError("A reversing transaction must name the transaction it reverses")
        self._check_new(transaction)
        transaction_id = self.db.create_reversal(transaction)
        self._log_booked(transaction_id, transaction)
        return transaction_id

    def _check_new(self, transaction: TransactionEntity) -> None:
        if transaction.id is not None:
            raise ValidationError(f"Transaction {transaction.id} is already stored")
        if transaction.contact_id is not None and self.db.get_contact(transaction.contact_id) is None:
            raise NotFoundError(contact_not_found(transaction.contact_id))

        account_ids = {account.id for account in self.db.list_accounts()}
        validate_transaction(transaction, account_ids)

    def _log_booked(self, transaction_id: int, transaction: TransactionEntity) -> None:
        logger.info(
            "Booked transaction %s on %s (%s, %.2f)",
            transaction_id,
            transaction.date.isoformat(),
            (transaction.transaction_type or TransactionType.STANDARD).value,
            transaction.total_debit,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If transaction not found
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        contact_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions in journal order with optional filters."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            contact_id=contact_id,
        )
