"""Domain model entities for doppik.

These are pure data classes representing bookkeeping concepts, independent
of the database schema. The calculation engine only ever sees these types,
so the same chart and journal can come from the database, a test fixture or
any other host.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Tolerance for "is this transaction balanced / is this balance zero".
BALANCE_TOLERANCE = Decimal("0.01")
# Tolerance for comparing the two sides of the balance sheet.
STATEMENT_TOLERANCE = Decimal("0.05")


class AccountType(str, Enum):
    """Account polarity."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_natural(self) -> bool:
        """True if the account grows on the debit side."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    @property
    def is_balance_sheet(self) -> bool:
        """True for accounts that carry their balance into the next year."""
        return self in (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY)


class TransactionType(str, Enum):
    """Kind tag of a journal transaction."""

    STANDARD = "STANDARD"
    OPENING_BALANCE = "OPENING_BALANCE"
    PAYROLL = "PAYROLL"
    CLOSING = "CLOSING"
    CORRECTION = "CORRECTION"
    DEPRECIATION = "DEPRECIATION"
    CREDIT_CARD = "CREDIT_CARD"
    REVERSAL = "REVERSAL"


class ContactType(str, Enum):
    """Customer (debtor) or vendor (creditor)."""

    CUSTOMER = "CUSTOMER"
    VENDOR = "VENDOR"


class ClosingState(str, Enum):
    """Progress of a fiscal-year closing."""

    NOT_PREPARED = "NOT_PREPARED"
    PREVIEWED = "PREVIEWED"
    BOOKED = "BOOKED"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    code: str
    name: str
    account_type: AccountType
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Contact:
    """Customer or vendor."""

    id: int
    name: str
    contact_type: ContactType
    gl_account_code: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalLine:
    """One debit/credit line of a transaction.

    Amounts are non-negative in ordinary data. Lines produced by a
    Generalstorno carry negated amounts on the original side.
    """

    account_id: int
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    cost_center: Optional[str] = None
    project: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Journal transaction.

    ``id`` is None for a transaction that has been built by an engine but
    not yet stored.
    """

    id: Optional[int]
    date: date
    description: str
    lines: tuple[JournalLine, ...]
    transaction_type: Optional[TransactionType] = None
    reference: Optional[str] = None
    contact_id: Optional[int] = None
    invoice_id: Optional[str] = None
    reverses_id: Optional[int] = None
    reversal_reason: Optional[str] = None
    is_reversed: bool = False
    reversed_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) < BALANCE_TOLERANCE


@dataclass(frozen=True)
class LedgerStats:
    """Balance partition of one account or contact as of a date."""

    opening_balance: Decimal = ZERO
    debit_month: Decimal = ZERO
    credit_month: Decimal = ZERO
    debit_ytd: Decimal = ZERO
    credit_ytd: Decimal = ZERO
    ending_balance: Decimal = ZERO


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range."""

    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class CategoryNode:
    """Node of a statutory statement tree.

    Roll-up nodes (``is_total``) hold their direct children; leaves have
    none. The trees are defined once in ``doppik.domain.statements``.
    """

    id: str
    label: str
    parent: Optional[str] = None
    children: tuple["CategoryNode", ...] = ()

    @property
    def is_total(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class YearData:
    """Computed statement values for one fiscal year."""

    year: int
    as_of: date
    values: dict[str, Decimal]
    sum_assets: Decimal
    sum_liabilities_and_equity: Decimal
    net_result: Decimal

    @property
    def difference(self) -> Decimal:
        """Assets minus liabilities and equity."""
        return self.sum_assets - self.sum_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) < STATEMENT_TOLERANCE


@dataclass(frozen=True)
class StatementLine:
    """Rendered statement row with prior-year comparison."""

    node: CategoryNode
    amount: Decimal
    previous_amount: Decimal
    level: int


@dataclass(frozen=True)
class AccountBalance:
    """Account together with a computed balance."""

    account: Account
    balance: Decimal


@dataclass(frozen=True)
class ClosingPreview:
    """Balances that a closing for ``closing_year`` would carry forward."""

    closing_year: int
    clearing_account: Account
    balances: tuple[AccountBalance, ...] = field(default_factory=tuple)
    total_debit: Decimal = ZERO
    total_credit: Decimal = ZERO

    @property
    def opening_year(self) -> int:
        return self.closing_year + 1
