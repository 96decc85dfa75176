"""Generalstorno: offsetting a booked transaction without deleting it.

The reversal repeats every line of the original on the same side with the
amount negated. Account sums move back exactly as if the original had
never been booked, while debit and credit turnover keep both entries
visible.
"""

from datetime import date
from typing import Optional

from doppik.database.base import Database
from doppik.domain.entities import JournalLine, Transaction, TransactionType
from doppik.domain.errors import (
    ConflictError,
    ValidationError,
    transaction_already_reversed,
)
from doppik.domain.ledger import closing_reference, is_tagged_opening
from doppik.domain.transaction import TransactionService
from doppik.logging_setup import get_logger

logger = get_logger(__name__)

REVERSAL_REFERENCE_PREFIX = "STO-"

# Reasons offered by the command line; any other text is accepted as well.
STORNO_REASONS = (
    "Retoure / Gutschrift",
    "Rechnungsfehler (falscher Betrag)",
    "Falscher Empfänger",
    "Doppelbuchung",
    "Sonstige Korrektur",
)


def build_reversal(
    original: Transaction, reason: str, reversal_date: Optional[date] = None
) -> Transaction:
    """Build the (unsaved) Generalstorno of a transaction.

    Args:
        original: Stored transaction to offset
        reason: Why the transaction is reversed
        reversal_date: Booking date of the reversal (default: original date)

    Returns:
        Reversal transaction with ``id`` None
    """
    lines = tuple(
        JournalLine(
            account_id=line.account_id,
            debit=-line.debit,
            credit=-line.credit,
            cost_center=line.cost_center,
            project=line.project,
        )
        for line in original.lines
    )
    return Transaction(
        id=None,
        date=reversal_date or original.date,
        description=f"STORNO ({reason}): {original.description}",
        lines=lines,
        transaction_type=TransactionType.REVERSAL,
        reference=f"{REVERSAL_REFERENCE_PREFIX}{original.reference or original.id}",
        contact_id=original.contact_id,
        invoice_id=original.invoice_id,
        reverses_id=original.id,
        reversal_reason=reason,
    )


class ReversalService:
    """Service booking reversals against the stored journal."""

    def __init__(self, db: Database):
        """Initialize reversal service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def reverse(
        self,
        transaction_id: int,
        reason: str,
        reversal_date: Optional[date] = None,
    ) -> int:
        """Reverse a stored transaction.

        Args:
            transaction_id: ID of the transaction to reverse
            reason: Why the transaction is reversed
            reversal_date: Booking date of the reversal (default: original date)

        Returns:
            ID of the reversal transaction

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If the reason is empty, the transaction is itself
                a reversal, or it is a booked year closing
            ConflictError: If the transaction has already been reversed
        """
        reason = reason.strip()
        if not reason:
            raise ValidationError("A reversal needs a reason")

        original = self.transactions.require_transaction(transaction_id)
        if original.is_reversed:
            raise ConflictError(transaction_already_reversed(original.id, original.reversed_by))
        if original.transaction_type is TransactionType.REVERSAL:
            raise ValidationError(f"Transaction {original.id} is a reversal and cannot be reversed")
        if is_tagged_opening(original) and original.reference == closing_reference(original.date.year):
            raise ValidationError(
                f"Transaction {original.id} is the closing of {original.date.year - 1}; "
                f"cancel the closing instead"
            )
        if reversal_date is not None and reversal_date < original.date:
            raise ValidationError("A reversal cannot be dated before the original transaction")

        reversal_id = self.transactions.record_reversal(
            build_reversal(original, reason, reversal_date)
        )
        logger.info(
            "Reversed transaction %s by transaction %s (%s)", original.id, reversal_id, reason
        )
        return reversal_id
