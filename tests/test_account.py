"""Tests for the chart of accounts and contacts."""

from datetime import date
from decimal import Decimal

import pytest

from doppik.domain.chart import CLEARING_ACCOUNT_CODE, SKR03_ACCOUNTS
from doppik.domain.entities import AccountType, ContactType
from doppik.domain.errors import (
    ConflictError,
    DependencyError,
    MissingAccountError,
    NotFoundError,
    ValidationError,
)
from doppik.utils.account_resolver import resolve_account


class TestAccountService:
    """Tests for AccountService."""

    def test_create_account(self, account_service):
        account_id = account_service.create_account(
            " 1200000 ", "Bank", AccountType.ASSET, description="Girokonto"
        )

        account = account_service.get_account(account_id)
        assert account.code == "1200000"
        assert account.name == "Bank"
        assert account.account_type is AccountType.ASSET
        assert account.description == "Girokonto"
        assert account.created_at is not None

    def test_duplicate_code(self, account_service):
        account_service.create_account("1200000", "Bank", AccountType.ASSET)

        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account("1200000", "Bank 2", AccountType.ASSET)

    def test_empty_name(self, account_service):
        with pytest.raises(ValidationError):
            account_service.create_account("1200000", "  ", AccountType.ASSET)

    def test_list_accounts_sorted_by_code(self, account_service):
        account_service.create_account("8400000", "Erlöse", AccountType.REVENUE)
        account_service.create_account("1200000", "Bank", AccountType.ASSET)

        assert [acc.code for acc in account_service.list_accounts()] == ["1200000", "8400000"]

    def test_rename(self, account_service):
        account_id = account_service.create_account("1200000", "Bank", AccountType.ASSET)
        account_service.rename_account(account_id, "Sparkasse")

        assert account_service.get_account(account_id).name == "Sparkasse"

    def test_rename_missing(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.rename_account(9, "Sparkasse")

    def test_change_type_without_postings(self, account_service):
        account_id = account_service.create_account("1590000", "Durchlaufende Posten", AccountType.ASSET)
        account_service.change_account_type(account_id, AccountType.LIABILITY)

        assert account_service.get_account(account_id).account_type is AccountType.LIABILITY

    def test_change_type_blocked_by_postings(self, account_service, chart, book):
        book(date(2024, 1, 5), "Miete", ("4210000", "800.00", "0"), ("1200000", "0", "800.00"))

        with pytest.raises(DependencyError, match="1 posting"):
            account_service.change_account_type(chart["1200000"].id, AccountType.LIABILITY)

    def test_require_account(self, account_service):
        with pytest.raises(MissingAccountError, match="Bank"):
            account_service.require_account("1200000", "Bank")

    def test_seed_chart_is_idempotent(self, account_service):
        created, skipped = account_service.seed_chart(SKR03_ACCOUNTS)
        assert (created, skipped) == (len(SKR03_ACCOUNTS), 0)

        created, skipped = account_service.seed_chart(SKR03_ACCOUNTS)
        assert (created, skipped) == (0, len(SKR03_ACCOUNTS))
        assert account_service.get_account_by_code(CLEARING_ACCOUNT_CODE) is not None

    def test_chart_codes_are_unique(self):
        codes = [code for code, _, _ in SKR03_ACCOUNTS]
        assert len(codes) == len(set(codes))


class TestResolveAccount:
    """Tests for resolving accounts from user input."""

    def test_by_code_then_id(self, account_service):
        account_id = account_service.create_account("1200000", "Bank", AccountType.ASSET)

        assert resolve_account(account_service, "1200000").id == account_id
        assert resolve_account(account_service, str(account_id)).code == "1200000"
        assert resolve_account(account_service, account_id).code == "1200000"

    def test_not_found(self, account_service):
        with pytest.raises(NotFoundError):
            resolve_account(account_service, "4711")


class TestContactService:
    """Tests for ContactService and contact balances."""

    def test_create_and_resolve(self, contact_service, chart):
        contact_id = contact_service.create_contact("Muster GmbH", ContactType.CUSTOMER, "1400000")

        contact = contact_service.require_contact(contact_id)
        assert contact.contact_type is ContactType.CUSTOMER
        assert contact.gl_account_code == "1400000"
        assert contact_service.resolve("Muster GmbH").id == contact_id
        assert contact_service.resolve(str(contact_id)).name == "Muster GmbH"

    def test_duplicate_name(self, contact_service):
        contact_service.create_contact("Muster GmbH", ContactType.CUSTOMER)

        with pytest.raises(ConflictError):
            contact_service.create_contact("Muster GmbH", ContactType.VENDOR)

    def test_missing_control_account(self, contact_service):
        with pytest.raises(MissingAccountError, match="control account of Muster GmbH"):
            contact_service.create_contact("Muster GmbH", ContactType.CUSTOMER, "1400000")

    def test_resolve_unknown(self, contact_service):
        with pytest.raises(NotFoundError):
            contact_service.resolve("Niemand")

    def test_customer_balance_ignores_tax_line(self, contact_service, ledger_service, book):
        contact_id = contact_service.create_contact("Muster GmbH", ContactType.CUSTOMER, "1400000")
        book(
            date(2024, 3, 1),
            "Rechnung 7",
            ("1400000", "119.00", "0"),
            ("8400000", "0", "100.00"),
            ("1776000", "0", "19.00"),
            contact_id=contact_id,
        )
        book(
            date(2024, 3, 15),
            "Zahlungseingang Rechnung 7",
            ("1200000", "119.00", "0"),
            ("1400000", "0", "19.00"),
            ("1400000", "0", "100.00"),
            contact_id=contact_id,
        )

        stats = ledger_service.get_contact_stats(contact_id, date(2024, 3, 31))
        assert stats.debit_ytd == Decimal("119.00")
        assert stats.credit_ytd == Decimal("119.00")
        assert stats.ending_balance == Decimal("0.00")

    def test_contact_stats_unknown_contact(self, ledger_service):
        with pytest.raises(NotFoundError, match="Contact 3"):
            ledger_service.get_contact_stats(3, date(2024, 3, 31))
