"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from doppik.database.models import (
    Account as ORMAccount,
    Contact as ORMContact,
    JournalLine as ORMJournalLine,
    Transaction as ORMTransaction,
)
from doppik.database.mappers import (
    account_to_domain,
    contact_to_domain,
    transaction_to_domain,
    transaction_to_orm,
)
from doppik.domain.entities import (
    Account,
    AccountType,
    Contact,
    ContactType,
    JournalLine,
    Transaction,
    TransactionType,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            code="1200000",
            name="Bank (Girokonto)",
            account_type="ASSET",
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.id == 1
        assert domain_account.code == "1200000"
        assert domain_account.account_type is AccountType.ASSET
        assert domain_account.description is None
        assert domain_account.created_at == orm_account.created_at


class TestContactMapper:
    """Tests for Contact mapper."""

    def test_contact_to_domain(self):
        """Test converting ORM Contact to domain Contact."""
        orm_contact = ORMContact(
            id=3,
            name="Muster GmbH",
            contact_type="VENDOR",
            gl_account_code="1600000",
            created_at=datetime.now(UTC),
        )
        domain_contact = contact_to_domain(orm_contact)

        assert isinstance(domain_contact, Contact)
        assert domain_contact.contact_type is ContactType.VENDOR
        assert domain_contact.gl_account_code == "1600000"


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction with lines to domain Transaction."""
        orm_transaction = ORMTransaction(
            id=1,
            date=date(2024, 1, 15),
            transaction_type="OPENING_BALANCE",
            description="Saldenvortrag aus 2023",
            reference="EB-2024",
            is_reversed=False,
            created_at=datetime.now(UTC),
            lines=[
                ORMJournalLine(position=0, account_id=1, debit=Decimal("50.00"), credit=Decimal("0")),
                ORMJournalLine(position=1, account_id=9, debit=Decimal("0"), credit=Decimal("50.00")),
            ],
        )
        domain_transaction = transaction_to_domain(orm_transaction)

        assert isinstance(domain_transaction, Transaction)
        assert domain_transaction.transaction_type is TransactionType.OPENING_BALANCE
        assert domain_transaction.reference == "EB-2024"
        assert domain_transaction.lines == (
            JournalLine(account_id=1, debit=Decimal("50.00"), credit=Decimal("0")),
            JournalLine(account_id=9, debit=Decimal("0"), credit=Decimal("50.00")),
        )
        assert domain_transaction.is_balanced

    def test_transaction_without_type(self):
        """Test converting an untagged ORM Transaction."""
        orm_transaction = ORMTransaction(
            id=2,
            date=date(2024, 1, 15),
            transaction_type=None,
            description="Altbuchung",
            is_reversed=False,
            lines=[],
        )
        domain_transaction = transaction_to_domain(orm_transaction)

        assert domain_transaction.transaction_type is None
        assert domain_transaction.reference is None
        assert domain_transaction.lines == ()

    def test_transaction_to_orm(self):
        """Test building ORM rows from an unsaved domain Transaction."""
        transaction = Transaction(
            id=None,
            date=date(2024, 4, 1),
            description="STORNO (Doppelbuchung): Miete",
            lines=(
                JournalLine(account_id=5, debit=Decimal("-800.00")),
                JournalLine(account_id=1, credit=Decimal("-800.00"), cost_center="KST-1"),
            ),
            transaction_type=TransactionType.REVERSAL,
            reverses_id=7,
            reversal_reason="Doppelbuchung",
        )
        orm_transaction = transaction_to_orm(transaction)

        assert orm_transaction.id is None
        assert orm_transaction.transaction_type == "REVERSAL"
        assert orm_transaction.reverses_id == 7
        assert [line.position for line in orm_transaction.lines] == [0, 1]
        assert orm_transaction.lines[1].cost_center == "KST-1"
        assert orm_transaction.lines[0].debit == Decimal("-800.00")
