"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from doppik.domain.entities import (
    Account,
    AccountType,
    Contact,
    ContactType,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for doppik.

    Acts as the chart-of-accounts provider and the journal store. The
    journal is append-only: the only update allowed on a stored transaction
    is setting its reversal linkage once.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        description: Optional[str] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by its code."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        account_type: Optional[AccountType] = None,
    ) -> None:
        """Update account fields that are not None."""
        pass

    @abstractmethod
    def get_account_line_count(self, account_id: int) -> int:
        """Count journal lines that reference an account."""
        pass

    # Contact operations
    @abstractmethod
    def create_contact(
        self,
        name: str,
        contact_type: ContactType,
        gl_account_code: Optional[str] = None,
    ) -> int:
        """Create a contact. Returns contact ID."""
        pass

    @abstractmethod
    def get_contact(self, contact_id: int) -> Optional[Contact]:
        """Get contact by ID."""
        pass

    @abstractmethod
    def list_contacts(self) -> list[Contact]:
        """List all contacts ordered by name."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, transaction: Transaction) -> int:
        """Store a transaction with its lines. Returns transaction ID.

        The ``id`` of the given entity is ignored.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        contact_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions in journal order (date, then ID).

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account_id: Optional filter for transactions touching an account
            contact_id: Optional contact filter
        """
        pass

    @abstractmethod
    def create_reversal(self, transaction: Transaction) -> int:
        """Store a reversing transaction and mark ``transaction.reverses_id`` as reversed.

        Both changes are committed together or not at all.

        Raises:
            NotFoundError: If the reversed transaction doesn't exist
            ConflictError: If it has already been reversed
        """
        pass
