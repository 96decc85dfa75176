"""Statutory statements: profit and loss and balance sheet (HGB, SKR03).

Accounts are mapped to statement categories by type and by the numeric
prefix of their code. Income-statement categories sum the movement inside
the reporting window; balance-sheet categories sum account balances at the
end of the window. The two equity lines that no account carries directly
are computed: the current-year result and the results of all prior years.
"""

from datetime import date
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from doppik.database.base import Database
from doppik.domain.closing import DEFAULT_CLEARING_PREFIX, clearing_account_prefix, is_clearing_account
from doppik.domain.entities import (
    BALANCE_TOLERANCE,
    ZERO,
    Account,
    AccountBalance,
    AccountType,
    CategoryNode,
    DateWindow,
    StatementLine,
    Transaction,
    YearData,
)
from doppik.domain.errors import ValidationError
from doppik.domain.ledger import account_stats, change_over_window
from doppik.logging_setup import get_logger

logger = get_logger(__name__)


def _tree(node_id: str, label: str, *children: tuple[str, str]) -> CategoryNode:
    return CategoryNode(
        id=node_id,
        label=label,
        children=tuple(
            CategoryNode(id=child_id, label=child_label, parent=node_id)
            for child_id, child_label in children
        ),
    )


PROFIT_AND_LOSS: tuple[CategoryNode, ...] = (
    CategoryNode("revenue", "1. Umsatzerlöse"),
    CategoryNode("revenue_other", "2. Sonstige betriebliche Erträge"),
    CategoryNode("material", "3. Materialaufwand"),
    CategoryNode("personnel", "4. Personalaufwand"),
    CategoryNode("depreciation", "5. Abschreibungen"),
    CategoryNode("other_cost", "6. Sonstige betriebliche Aufwendungen"),
    CategoryNode("interest", "7. Zinsen und ähnliche Aufwendungen"),
    CategoryNode("taxes", "8. Steuern vom Einkommen und Ertrag"),
)

ASSETS: tuple[CategoryNode, ...] = (
    _tree(
        "act_A",
        "A. Anlagevermögen",
        ("act_A_I", "I. Immaterielle Vermögensgegenstände"),
        ("act_A_II", "II. Sachanlagen"),
        ("act_A_III", "III. Finanzanlagen"),
    ),
    _tree(
        "act_B",
        "B. Umlaufvermögen",
        ("act_B_I", "I. Vorräte"),
        ("act_B_II", "II. Forderungen und sonstige Vermögensgegenstände"),
        ("act_B_III", "III. Kassenbestand, Guthaben bei Kreditinstituten"),
    ),
    CategoryNode("act_C", "C. Rechnungsabgrenzungsposten"),
)

LIABILITIES_AND_EQUITY: tuple[CategoryNode, ...] = (
    _tree(
        "pas_A",
        "A. Eigenkapital",
        ("pas_A_I", "I. Kapital / Einlagen"),
        ("pas_A_II", "II. Gewinnvortrag / Verlustvortrag"),
        ("pas_A_III", "III. Jahresüberschuss / Jahresfehlbetrag"),
        ("pas_A_IV", "IV. Entnahmen / Einlagen (Privat)"),
    ),
    CategoryNode("pas_B", "B. Rückstellungen"),
    _tree(
        "pas_C",
        "C. Verbindlichkeiten",
        ("pas_C_I", "I. Verbindlichkeiten aus Lieferungen und Leistungen"),
        ("pas_C_II", "II. Verbindlichkeiten gegenüber Kreditinstituten"),
        ("pas_C_III", "III. Sonstige Verbindlichkeiten"),
    ),
)

INCOME_CATEGORIES = ("revenue", "revenue_other")
EXPENSE_CATEGORIES = ("material", "personnel", "depreciation", "other_cost", "interest", "taxes")
RETAINED_EARNINGS = "pas_A_II"
CURRENT_RESULT = "pas_A_III"


def iter_nodes(tree: Sequence[CategoryNode]) -> Iterator[tuple[CategoryNode, int]]:
    """Yield every node of a tree in display order with its depth."""
    for root in tree:
        yield root, 0
        for child in root.children:
            yield child, 1


def account_code_prefix(code: str) -> int:
    """Numeric value of the first four digits of an account code (0 if none)."""
    head = code.strip()[:4]
    return int(head) if head.isdigit() else 0


def classify(account: Account) -> str:
    """Map an account to its statement category.

    Every account maps to exactly one leaf; codes outside the known ranges
    land in the default bucket of their type.
    """
    c = account_code_prefix(account.code)
    name = account.name.lower()

    if account.account_type is AccountType.REVENUE:
        if 8000 <= c <= 8999 and "eigenverbrauch" not in name:
            return "revenue"
        return "revenue_other"

    if account.account_type is AccountType.EXPENSE:
        if 3000 <= c <= 3999:
            return "material"
        if 4100 <= c <= 4199:
            return "personnel"
        if 4200 <= c <= 4299:
            return "other_cost"
        if 4820 <= c <= 4860:
            return "depreciation"
        if 2100 <= c <= 2150:
            return "interest"
        if 2200 <= c <= 2299:
            return "taxes"
        return "other_cost"

    if account.account_type is AccountType.ASSET:
        if 10 <= c <= 49:
            return "act_A_I"
        if 50 <= c <= 499:
            return "act_A_II"
        if 500 <= c <= 699:
            return "act_A_III"
        if 3960 <= c <= 3980:
            return "act_B_I"
        if 1400 <= c <= 1549:
            return "act_B_II"
        if 1000 <= c <= 1399:
            return "act_B_III"
        if 1570 <= c <= 1599:
            return "act_B_II"
        if 980 <= c <= 990:
            return "act_C"
        return "act_B_II"

    if account.account_type is AccountType.LIABILITY:
        if 800 <= c <= 999 and "rückstellung" not in name:
            return "pas_A_I"
        if 2300 <= c <= 2399 or 950 <= c <= 979:
            return "pas_B"
        if 1600 <= c <= 1699:
            return "pas_C_I"
        if 1705 <= c <= 1709:
            return "pas_C_II"
        if 1700 <= c <= 1999:
            return "pas_C_III"
        return "pas_C_III"

    # Equity
    if 1800 <= c <= 1899:
        return "pas_A_IV"
    if 800 <= c <= 899:
        return "pas_A_I"
    if 900 <= c <= 949:
        return "pas_A_II"
    return "pas_A_I"


def year_window(year: int, as_of: Optional[date] = None) -> DateWindow:
    """Reporting window of a fiscal year, cut off at ``as_of``.

    Raises:
        ValidationError: If ``as_of`` lies outside the year
    """
    if as_of is None:
        as_of = date(year, 12, 31)
    if as_of.year != year:
        raise ValidationError(f"Cut-off date {as_of.isoformat()} is not in {year}")
    return DateWindow(date(year, 1, 1), as_of)


def _account_amount(
    account: Account, journal: Sequence[Transaction], window: DateWindow
) -> Decimal:
    if account.account_type.is_balance_sheet:
        return account_stats(account, journal, window.end).ending_balance
    return change_over_window(account, journal, window.start, window.end)


def aggregate_category(
    category_id: str,
    account_type: AccountType,
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    window: DateWindow,
    clearing_prefix: str = DEFAULT_CLEARING_PREFIX,
) -> Decimal:
    """Sum the accounts of one type that classify to a category."""
    total = ZERO
    for account in accounts:
        if account.account_type is not account_type or is_clearing_account(account, clearing_prefix):
            continue
        if classify(account) == category_id:
            total += _account_amount(account, journal, window)
    return total


def category_accounts(
    category_id: str,
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    window: DateWindow,
    clearing_prefix: str = DEFAULT_CLEARING_PREFIX,
) -> list[AccountBalance]:
    """Drill-down rows of a category: accounts with a non-zero amount."""
    rows = []
    for account in sorted(accounts, key=lambda acc: acc.code):
        if is_clearing_account(account, clearing_prefix) or classify(account) != category_id:
            continue
        amount = _account_amount(account, journal, window)
        if abs(amount) >= BALANCE_TOLERANCE:
            rows.append(AccountBalance(account=account, balance=amount))
    return rows


def roll_up(tree: Sequence[CategoryNode], values: dict[str, Decimal]) -> dict[str, Decimal]:
    """Return a copy of ``values`` where every total node sums its children."""
    rolled = dict(values)
    for root in tree:
        if root.is_total:
            rolled[root.id] = sum((rolled.get(child.id, ZERO) for child in root.children), ZERO)
        else:
            rolled.setdefault(root.id, ZERO)
    return rolled


def net_result(values: dict[str, Decimal]) -> Decimal:
    """Income minus expenses of a set of P&L category values."""
    income = sum((values.get(key, ZERO) for key in INCOME_CATEGORIES), ZERO)
    expenses = sum((values.get(key, ZERO) for key in EXPENSE_CATEGORIES), ZERO)
    return income - expenses


def _category_values(
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    window: DateWindow,
    clearing_prefix: str,
    balance_sheet: bool,
) -> dict[str, Decimal]:
    values: dict[str, Decimal] = {}
    for account in accounts:
        if account.account_type.is_balance_sheet != balance_sheet:
            continue
        if is_clearing_account(account, clearing_prefix):
            continue
        category = classify(account)
        values[category] = values.get(category, ZERO) + _account_amount(account, journal, window)
    return values


def _first_year(journal: Sequence[Transaction], fallback: int) -> int:
    return min((txn.date.year for txn in journal), default=fallback)


def build_year_data(
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    year: int,
    as_of: Optional[date] = None,
    clearing_prefix: str = DEFAULT_CLEARING_PREFIX,
) -> YearData:
    """Compute every statement value of a fiscal year.

    Args:
        journal: All transactions
        accounts: Chart of accounts
        year: Fiscal year
        as_of: Cut-off date inside the year (default: Dec 31)
        clearing_prefix: Code prefix of the carry-forward clearing account

    Returns:
        YearData with P&L and balance-sheet values keyed by category ID
    """
    window = year_window(year, as_of)

    values = {node.id: ZERO for tree in (PROFIT_AND_LOSS, ASSETS, LIABILITIES_AND_EQUITY)
              for node, _ in iter_nodes(tree)}
    values.update(_category_values(journal, accounts, window, clearing_prefix, balance_sheet=False))
    result = net_result(values)

    values.update(_category_values(journal, accounts, window, clearing_prefix, balance_sheet=True))

    prior_results = ZERO
    for prior_year in range(_first_year(journal, year), year):
        prior_window = DateWindow(date(prior_year, 1, 1), date(prior_year, 12, 31))
        prior_values = _category_values(
            journal, accounts, prior_window, clearing_prefix, balance_sheet=False
        )
        prior_results += net_result(prior_values)

    values[RETAINED_EARNINGS] = values[RETAINED_EARNINGS] + prior_results
    values[CURRENT_RESULT] = result

    values = roll_up(ASSETS, values)
    values = roll_up(LIABILITIES_AND_EQUITY, values)

    return YearData(
        year=year,
        as_of=window.end,
        values=values,
        sum_assets=sum((values[root.id] for root in ASSETS), ZERO),
        sum_liabilities_and_equity=sum((values[root.id] for root in LIABILITIES_AND_EQUITY), ZERO),
        net_result=result,
    )


def _statement_lines(
    tree: Sequence[CategoryNode], current: YearData, previous: Optional[YearData]
) -> list[StatementLine]:
    return [
        StatementLine(
            node=node,
            amount=current.values.get(node.id, ZERO),
            previous_amount=previous.values.get(node.id, ZERO) if previous else ZERO,
            level=level,
        )
        for node, level in iter_nodes(tree)
    ]


def profit_and_loss_lines(
    current: YearData, previous: Optional[YearData] = None
) -> list[StatementLine]:
    """P&L rows with the prior-year comparison column."""
    return _statement_lines(PROFIT_AND_LOSS, current, previous)


def balance_sheet_lines(
    current: YearData, previous: Optional[YearData] = None
) -> tuple[list[StatementLine], list[StatementLine]]:
    """Asset rows and liability/equity rows with the prior-year comparison."""
    return (
        _statement_lines(ASSETS, current, previous),
        _statement_lines(LIABILITIES_AND_EQUITY, current, previous),
    )


class StatementService:
    """Service building statements from the stored journal."""

    def __init__(self, db: Database, clearing_prefix: Optional[str] = None):
        """Initialize statement service.

        Args:
            db: Database instance
            clearing_prefix: Code prefix of the clearing account (defaults to
                DOPPIK_CLEARING_ACCOUNT or "9000")
        """
        self.db = db
        self.clearing_prefix = clearing_account_prefix(clearing_prefix)

    def get_year_data(self, year: int, as_of: Optional[date] = None) -> YearData:
        """Compute the statement values of a year.

        An unbalanced balance sheet is reported as a warning, never corrected.
        """
        data = build_year_data(
            self.db.list_transactions(),
            self.db.list_accounts(),
            year,
            as_of,
            self.clearing_prefix,
        )
        if not data.is_balanced:
            logger.warning(
                "Balance sheet %d (as of %s) does not balance: assets %.2f, "
                "liabilities and equity %.2f, difference %.2f",
                year,
                data.as_of.isoformat(),
                data.sum_assets,
                data.sum_liabilities_and_equity,
                data.difference,
            )
        return data

    def _comparison(self, year: int, as_of: Optional[date]) -> tuple[YearData, YearData]:
        current = self.get_year_data(year, as_of)
        previous = build_year_data(
            self.db.list_transactions(),
            self.db.list_accounts(),
            year - 1,
            None,
            self.clearing_prefix,
        )
        return current, previous

    def profit_and_loss(
        self, year: int, as_of: Optional[date] = None
    ) -> tuple[YearData, list[StatementLine]]:
        """Get the P&L of a year compared with the prior year."""
        current, previous = self._comparison(year, as_of)
        return current, profit_and_loss_lines(current, previous)

    def balance_sheet(
        self, year: int, as_of: Optional[date] = None
    ) -> tuple[YearData, list[StatementLine], list[StatementLine]]:
        """Get the balance sheet of a year compared with the prior year."""
        current, previous = self._comparison(year, as_of)
        assets, liabilities = balance_sheet_lines(current, previous)
        return current, assets, liabilities

    def get_category_accounts(
        self, category_id: str, year: int, as_of: Optional[date] = None
    ) -> list[AccountBalance]:
        """Get the per-account rows behind one statement category.

        Raises:
            ValidationError: If the category doesn't exist
        """
        known = {node.id for tree in (PROFIT_AND_LOSS, ASSETS, LIABILITIES_AND_EQUITY)
                 for node, _ in iter_nodes(tree)}
        if category_id not in known:
            raise ValidationError(f"Unknown statement category '{category_id}'")
        return category_accounts(
            category_id,
            self.db.list_transactions(),
            self.db.list_accounts(),
            year_window(year, as_of),
            self.clearing_prefix,
        )
