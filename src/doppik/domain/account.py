"""Chart of accounts service."""

from typing import Iterable, Optional

from doppik.database.base import Database
from doppik.domain.entities import Account as AccountEntity, AccountType
from doppik.domain.errors import (
    ConflictError,
    DependencyError,
    MissingAccountError,
    NotFoundError,
    ValidationError,
    account_not_found,
    account_type_locked,
    duplicate_account_code,
)
from doppik.logging_setup import get_logger

logger = get_logger(__name__)


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        description: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            code: Account code (SKR03 style, e.g. "1200000")
            name: Account name
            account_type: Account polarity
            description: Optional free text

        Returns:
            Account ID

        Raises:
            ValidationError: If code or name is empty
            ConflictError: If an account with the same code already exists
        """
        code = code.strip()
        name = name.strip()
        if not code:
            raise ValidationError("Account code must not be empty")
        if not name:
            raise ValidationError("Account name must not be empty")
        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(code))

        account_id = self.db.create_account(
            code=code, name=name, account_type=account_type, description=description
        )
        logger.debug("Created account %s %s (%s)", code, name, account_type.value)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[AccountEntity]:
        """Get account by code, or None if not found."""
        return self.db.get_account_by_code(code)

    def require_account(self, code: str, purpose: str) -> AccountEntity:
        """Get an account an operation cannot run without.

        Raises:
            MissingAccountError: If no account has the code
        """
        account = self.db.get_account_by_code(code)
        if account is None:
            raise MissingAccountError(code, purpose)
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts ordered by code."""
        return self.db.list_accounts()

    def rename_account(
        self, account_id: int, name: str, description: Optional[str] = None
    ) -> None:
        """Rename an account.

        Args:
            account_id: Account ID to rename
            name: New account name
            description: Optional new description (if None, it is not updated)

        Raises:
            NotFoundError: If account not found
            ValidationError: If the new name is empty
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if not name.strip():
            raise ValidationError("Account name must not be empty")
        self.db.update_account(account_id, name=name.strip(), description=description)

    def change_account_type(self, account_id: int, account_type: AccountType) -> None:
        """Change the polarity of an account that has no postings yet.

        Changing the type of a used account would silently flip the sign of
        every historical balance, so it is refused.

        Raises:
            NotFoundError: If account not found
            DependencyError: If journal lines reference the account
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.account_type is account_type:
            return

        line_count = self.db.get_account_line_count(account_id)
        if line_count:
            raise DependencyError(account_type_locked(account.code, line_count))
        self.db.update_account(account_id, account_type=account_type)
        logger.info(
            "Changed type of account %s from %s to %s",
            account.code,
            account.account_type.value,
            account_type.value,
        )

    def seed_chart(
        self, entries: Iterable[tuple[str, str, AccountType]]
    ) -> tuple[int, int]:
        """Create every account of a chart whose code does not exist yet.

        Args:
            entries: (code, name, account_type) tuples

        Returns:
            (created, skipped) counts
        """
        created = skipped = 0
        for code, name, account_type in entries:
            if self.db.get_account_by_code(code) is not None:
                skipped += 1
                continue
            self.db.create_account(code=code, name=name, account_type=account_type)
            created += 1
        logger.info("Seeded chart of accounts: %d created, %d skipped", created, skipped)
        return created, skipped
