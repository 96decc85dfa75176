"""Contact (customer/vendor) domain service."""

from typing import Optional

from doppik.database.base import Database
from doppik.domain.entities import Contact as ContactEntity, ContactType
from doppik.domain.errors import (
    ConflictError,
    MissingAccountError,
    NotFoundError,
    ValidationError,
    contact_not_found,
)


class ContactService:
    """Service for managing customers and vendors."""

    def __init__(self, db: Database):
        """Initialize contact service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_contact(
        self,
        name: str,
        contact_type: ContactType,
        gl_account_code: Optional[str] = None,
    ) -> int:
        """Create a contact.

        Args:
            name: Contact name (unique)
            contact_type: Customer or vendor
            gl_account_code: Optional control account, e.g. "1400000"

        Returns:
            Contact ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a contact with the same name exists
            MissingAccountError: If the control account is not in the chart
        """
        name = name.strip()
        if not name:
            raise ValidationError("Contact name must not be empty")
        for contact in self.db.list_contacts():
            if contact.name == name:
                raise ConflictError(f"Contact with name '{name}' already exists")
        if gl_account_code is not None and self.db.get_account_by_code(gl_account_code) is None:
            raise MissingAccountError(gl_account_code, f"control account of {name}")

        return self.db.create_contact(
            name=name, contact_type=contact_type, gl_account_code=gl_account_code
        )

    def get_contact(self, contact_id: int) -> Optional[ContactEntity]:
        """Get contact by ID, or None if not found."""
        return self.db.get_contact(contact_id)

    def require_contact(self, contact_id: int) -> ContactEntity:
        """Get contact by ID.

        Raises:
            NotFoundError: If contact not found
        """
        contact = self.db.get_contact(contact_id)
        if contact is None:
            raise NotFoundError(contact_not_found(contact_id))
        return contact

    def list_contacts(self) -> list[ContactEntity]:
        """List all contacts ordered by name."""
        return self.db.list_contacts()

    def resolve(self, reference: str) -> ContactEntity:
        """Resolve a contact by numeric ID or exact name.

        Raises:
            NotFoundError: If neither matches
        """
        if reference.isdigit():
            contact = self.db.get_contact(int(reference))
            if contact is not None:
                return contact
        for contact in self.db.list_contacts():
            if contact.name == reference:
                return contact
        raise NotFoundError(f"Contact '{reference}' not found")
