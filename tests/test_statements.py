"""Tests for profit and loss and balance sheet computation."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from doppik.domain.chart import SKR03_ACCOUNTS
from doppik.domain.entities import Account, AccountType
from doppik.domain.errors import ValidationError
from doppik.domain.statements import (
    ASSETS,
    LIABILITIES_AND_EQUITY,
    PROFIT_AND_LOSS,
    classify,
    iter_nodes,
    net_result,
    roll_up,
    year_window,
)


def _leaf_ids(*trees):
    return {node.id for tree in trees for node, _ in iter_nodes(tree) if not node.is_total}


@pytest.fixture
def first_year(book):
    """Book a small 2024: capital contribution, one sale, one expense."""
    book(date(2024, 1, 2), "Einzahlung Stammkapital", ("1200000", "1000.00", "0"), ("0800000", "0", "1000.00"))
    book(
        date(2024, 3, 10),
        "Rechnung 1001",
        ("1200000", "119.00", "0"),
        ("8400000", "0", "100.00"),
        ("1776000", "0", "19.00"),
    )
    book(date(2024, 4, 1), "Büromaterial", ("4930000", "50.00", "0"), ("1200000", "0", "50.00"))


class TestClassify:
    """Tests for mapping accounts to statement categories."""

    @pytest.mark.parametrize("code,name,account_type", SKR03_ACCOUNTS)
    def test_every_chart_account_maps_to_a_leaf(self, code, name, account_type):
        account = Account(id=1, code=code, name=name, account_type=account_type)
        category = classify(account)

        if account_type.is_balance_sheet:
            assert category in _leaf_ids(ASSETS, LIABILITIES_AND_EQUITY)
        else:
            assert category in _leaf_ids(PROFIT_AND_LOSS)

    @pytest.mark.parametrize(
        "code,name,account_type,expected",
        [
            ("8400000", "Erlöse 19% USt", AccountType.REVENUE, "revenue"),
            ("8910000", "Unentgeltliche Wertabgaben (Eigenverbrauch) 19%", AccountType.REVENUE, "revenue_other"),
            ("2650000", "Sonstige Zinsen und ähnliche Erträge", AccountType.REVENUE, "revenue_other"),
            ("3400000", "Wareneingang 19% Vorsteuer", AccountType.EXPENSE, "material"),
            ("4130000", "Gesetzliche soziale Aufwendungen", AccountType.EXPENSE, "personnel"),
            ("4210000", "Miete", AccountType.EXPENSE, "other_cost"),
            ("4830000", "Abschreibungen auf Sachanlagen", AccountType.EXPENSE, "depreciation"),
            ("2100000", "Zinsen und ähnliche Aufwendungen", AccountType.EXPENSE, "interest"),
            ("2200000", "Körperschaftsteuer", AccountType.EXPENSE, "taxes"),
            ("4930000", "Bürobedarf", AccountType.EXPENSE, "other_cost"),
            ("0027000", "EDV-Software", AccountType.ASSET, "act_A_I"),
            ("0420000", "Büroeinrichtung", AccountType.ASSET, "act_A_II"),
            ("0500000", "Anteile an verbundenen Unternehmen", AccountType.ASSET, "act_A_III"),
            ("3980000", "Bestand Waren", AccountType.ASSET, "act_B_I"),
            ("1400000", "Forderungen a.L.L.", AccountType.ASSET, "act_B_II"),
            ("1576000", "Abziehbare Vorsteuer 19%", AccountType.ASSET, "act_B_II"),
            ("1200000", "Bank (Girokonto)", AccountType.ASSET, "act_B_III"),
            ("0980000", "Aktive Rechnungsabgrenzung", AccountType.ASSET, "act_C"),
            ("0950000", "Pensionsrückstellungen", AccountType.LIABILITY, "pas_B"),
            ("2300000", "Sonstige Rückstellungen (Klasse 2)", AccountType.LIABILITY, "pas_B"),
            ("1600000", "Verbindlichkeiten a.L.L.", AccountType.LIABILITY, "pas_C_I"),
            ("1705000", "Darlehen", AccountType.LIABILITY, "pas_C_II"),
            ("1776000", "Umsatzsteuer 19%", AccountType.LIABILITY, "pas_C_III"),
            ("0800000", "Gezeichnetes Kapital", AccountType.EQUITY, "pas_A_I"),
            ("0920000", "Gewinnvortrag", AccountType.EQUITY, "pas_A_II"),
            ("1800000", "Privatentnahmen", AccountType.EQUITY, "pas_A_IV"),
        ],
    )
    def test_ranges(self, code, name, account_type, expected):
        assert classify(Account(id=1, code=code, name=name, account_type=account_type)) == expected

    def test_unknown_codes_fall_back_by_type(self):
        assert classify(Account(id=1, code="ABC", name="Sonstiges", account_type=AccountType.ASSET)) == "act_B_II"
        assert classify(Account(id=2, code="7000", name="Sonstiges", account_type=AccountType.LIABILITY)) == "pas_C_III"
        assert classify(Account(id=3, code="7000", name="Sonstiges", account_type=AccountType.EXPENSE)) == "other_cost"


class TestHelpers:
    """Tests for tree and window helpers."""

    def test_roll_up_sums_children(self):
        values = {
            "act_A_I": Decimal("10.00"),
            "act_A_II": Decimal("20.00"),
            "act_B_III": Decimal("5.00"),
            "act_C": Decimal("1.00"),
        }
        rolled = roll_up(ASSETS, values)

        assert rolled["act_A"] == Decimal("30.00")
        assert rolled["act_B"] == Decimal("5.00")
        assert rolled["act_C"] == Decimal("1.00")
        assert "act_A" not in values

    def test_net_result(self):
        values = {"revenue": Decimal("300"), "revenue_other": Decimal("20"), "personnel": Decimal("120")}
        assert net_result(values) == Decimal("200")

    def test_year_window_defaults_to_year_end(self):
        window = year_window(2024)
        assert window.start == date(2024, 1, 1)
        assert window.end == date(2024, 12, 31)

    def test_year_window_rejects_date_outside_year(self):
        with pytest.raises(ValidationError, match="not in 2024"):
            year_window(2024, date(2025, 1, 1))


class TestStatementService:
    """Tests for statements built from the stored journal."""

    def test_profit_and_loss(self, statement_service, first_year):
        data, lines = statement_service.profit_and_loss(2024)
        by_id = {line.node.id: line for line in lines}

        assert data.net_result == Decimal("50.00")
        assert by_id["revenue"].amount == Decimal("100.00")
        assert by_id["other_cost"].amount == Decimal("50.00")
        assert by_id["revenue"].previous_amount == Decimal("0")
        assert [line.node.id for line in lines] == [node.id for node in PROFIT_AND_LOSS]

    def test_balance_sheet_balances(self, statement_service, first_year):
        data, assets, liabilities = statement_service.balance_sheet(2024)

        assert data.values["act_B_III"] == Decimal("1069.00")
        assert data.values["act_B"] == Decimal("1069.00")
        assert data.values["pas_A_I"] == Decimal("1000.00")
        assert data.values["pas_A_III"] == Decimal("50.00")
        assert data.values["pas_C_III"] == Decimal("19.00")
        assert data.sum_assets == data.sum_liabilities_and_equity == Decimal("1069.00")
        assert data.is_balanced
        assert assets[0].node.id == "act_A" and assets[0].level == 0
        assert liabilities[1].node.id == "pas_A_I" and liabilities[1].level == 1

    def test_prior_results_become_retained_earnings(self, statement_service, book, first_year):
        book(
            date(2025, 2, 1),
            "Rechnung 1002",
            ("1200000", "119.00", "0"),
            ("8400000", "0", "100.00"),
            ("1776000", "0", "19.00"),
        )
        data = statement_service.get_year_data(2025)

        assert data.values["pas_A_II"] == Decimal("50.00")
        assert data.values["pas_A_III"] == Decimal("100.00")
        assert data.sum_assets == Decimal("1188.00")
        assert data.is_balanced

    def test_balance_sheet_still_balances_after_closing(
        self, statement_service, closing_service, book, first_year
    ):
        closing_service.preview(2024)
        closing_service.book(2024)
        book(
            date(2025, 2, 1),
            "Rechnung 1002",
            ("1200000", "119.00", "0"),
            ("8400000", "0", "100.00"),
            ("1776000", "0", "19.00"),
        )
        data = statement_service.get_year_data(2025)

        assert data.values["act_B_III"] == Decimal("1188.00")
        assert data.values["pas_A_I"] == Decimal("1000.00")
        assert data.values["pas_A_II"] == Decimal("50.00")
        assert data.values["pas_C_III"] == Decimal("38.00")
        assert data.is_balanced

    def test_as_of_cuts_off_the_year(self, statement_service, first_year):
        data = statement_service.get_year_data(2024, date(2024, 3, 31))

        assert data.net_result == Decimal("100.00")
        assert data.values["act_B_III"] == Decimal("1119.00")
        assert data.is_balanced

    def test_category_drill_down(self, statement_service, first_year):
        rows = statement_service.get_category_accounts("act_B_III", 2024)

        assert [(row.account.code, row.balance) for row in rows] == [("1200000", Decimal("1069.00"))]

    def test_unknown_category(self, statement_service, first_year):
        with pytest.raises(ValidationError, match="Unknown statement category"):
            statement_service.get_category_accounts("act_Z", 2024)

    def test_clearing_account_is_excluded(self, statement_service, closing_service, first_year):
        closing_service.preview(2024)
        closing_service.book(2024)

        rows = statement_service.get_category_accounts("pas_A_I", 2025)

        assert [row.account.code for row in rows] == ["0800000"]
        assert statement_service.get_year_data(2025).values["pas_A_I"] == Decimal("1000.00")

    def test_year_after_unclosed_year(
        self, statement_service, closing_service, ledger_service, book, chart, first_year
    ):
        closing_service.preview(2024)
        closing_service.book(2024)
        book(
            date(2025, 5, 1),
            "Rechnung 1002",
            ("1200000", "119.00", "0"),
            ("8400000", "0", "100.00"),
            ("1776000", "0", "19.00"),
        )

        bank = chart["1200000"].id
        end_2025 = ledger_service.get_account_stats(bank, date(2025, 12, 31))
        opening_2026 = ledger_service.get_account_stats(bank, date(2026, 1, 31))
        assert end_2025.ending_balance == Decimal("1188.00")
        assert opening_2026.opening_balance == end_2025.ending_balance

        data = statement_service.get_year_data(2026)
        assert data.values["act_B_III"] == Decimal("1188.00")
        assert data.values["pas_A_II"] == Decimal("150.00")
        assert data.values["pas_C_III"] == Decimal("38.00")
        assert data.sum_assets == data.sum_liabilities_and_equity == Decimal("1188.00")

    def test_unbalanced_sheet_is_reported_not_corrected(self, statement_service, book, caplog):
        book(date(2024, 5, 2), "Fehlbuchung", ("1200000", "75.00", "0"), ("9000000", "0", "75.00"))

        with caplog.at_level(logging.WARNING, logger="doppik.domain.statements"):
            data = statement_service.get_year_data(2024)

        assert not data.is_balanced
        assert data.sum_assets == Decimal("75.00")
        assert data.sum_liabilities_and_equity == Decimal("0")
        assert data.difference == Decimal("75.00")
        assert "does not balance" in caplog.text
        assert "difference 75.00" in caplog.text
