"""Balance aggregation over the journal.

The module-level functions are pure: they take the chart and the journal as
arguments and never touch the database. ``LedgerService`` loads both from
the database and delegates to them.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, NamedTuple, Optional, Sequence

from doppik.database.base import Database
from doppik.domain.entities import (
    ZERO,
    Account,
    AccountType,
    DateWindow,
    JournalLine,
    LedgerStats,
    Transaction,
    TransactionType,
)
from doppik.domain.errors import NotFoundError, account_not_found, contact_not_found

# A transaction without the opening tag whose description contains one of
# these words is treated as a carry-forward booking.
OPENING_KEYWORDS = ("saldovortrag", "eröffnungsbilanz", "startkapital", "vortrag")
OPENING_REFERENCE_PREFIX = "EB"


def closing_reference(opening_year: int) -> str:
    """Reference of the carry-forward entry that opens ``opening_year``."""
    return f"{OPENING_REFERENCE_PREFIX}-{opening_year}"


def is_tagged_opening(txn: Transaction) -> bool:
    """Structured check: the transaction carries the opening-balance tag."""
    return txn.transaction_type is TransactionType.OPENING_BALANCE


def looks_like_legacy_opening(txn: Transaction) -> bool:
    """Text heuristic for historical data that predates the kind tag."""
    reference = (txn.reference or "").upper()
    description = (txn.description or "").lower()
    if reference.startswith(OPENING_REFERENCE_PREFIX):
        return True
    return any(keyword in description for keyword in OPENING_KEYWORDS)


def is_opening_transaction(txn: Transaction) -> bool:
    """Decide whether a transaction belongs to the opening-balance column.

    The tag is checked first. Every transaction without it, tagged or not,
    still goes through the text heuristic for historical carry-forwards.
    """
    if is_tagged_opening(txn):
        return True
    return looks_like_legacy_opening(txn)


def signed_amount(account_type: AccountType, line: JournalLine) -> Decimal:
    """Balance contribution of a line for an account of the given type."""
    if account_type.is_debit_natural:
        return line.debit - line.credit
    return line.credit - line.debit


def superseded_transaction_ids(journal: Iterable[Transaction]) -> set[int]:
    """Ids of cancelled opening entries together with their cancellations.

    A closing cancellation swaps every line of the opening entry, so the pair
    contributes nothing to any account and is left out of aggregation.
    """
    journal = list(journal)
    opening_ids = {
        txn.id for txn in journal if txn.id is not None and is_tagged_opening(txn)
    }
    superseded: set[int] = set()
    for txn in journal:
        if (
            txn.transaction_type is TransactionType.CORRECTION
            and txn.reverses_id in opening_ids
        ):
            superseded.add(txn.reverses_id)
            if txn.id is not None:
                superseded.add(txn.id)
    return superseded


def find_active_closing(
    journal: Iterable[Transaction],
    opening_year: int,
    superseded: Optional[set[int]] = None,
) -> Optional[Transaction]:
    """Return the uncancelled carry-forward entry that opens ``opening_year``."""
    journal = list(journal)
    if superseded is None:
        superseded = superseded_transaction_ids(journal)
    reference = closing_reference(opening_year)
    for txn in journal:
        if txn.id in superseded or txn.is_reversed:
            continue
        if (
            is_tagged_opening(txn)
            and txn.date.year == opening_year
            and txn.reference == reference
        ):
            return txn
    return None


def latest_active_closing(
    journal: Iterable[Transaction],
    year: int,
    superseded: Optional[set[int]] = None,
) -> Optional[Transaction]:
    """Return the most recent uncancelled carry-forward entry opening ``year`` or earlier."""
    journal = list(journal)
    if superseded is None:
        superseded = superseded_transaction_ids(journal)
    latest = None
    for txn in journal:
        if txn.id in superseded or txn.is_reversed or txn.date.year > year:
            continue
        if not is_tagged_opening(txn) or txn.reference != closing_reference(txn.date.year):
            continue
        if latest is None or txn.date.year > latest.date.year:
            latest = txn
    return latest


def opening_entries(
    journal: Iterable[Transaction],
    year: int,
    superseded: Optional[set[int]] = None,
) -> list[Transaction]:
    """Uncancelled transactions tagged as opening balances and dated in ``year``."""
    journal = list(journal)
    if superseded is None:
        superseded = superseded_transaction_ids(journal)
    return [
        txn
        for txn in journal
        if txn.id not in superseded
        and not txn.is_reversed
        and txn.date.year == year
        and is_tagged_opening(txn)
    ]


class _Posting(NamedTuple):
    date: date
    is_opening: bool
    line: JournalLine
    account_type: AccountType


def _accumulate(
    postings: Iterable[_Posting], as_of: date, debit_natural: bool
) -> LedgerStats:
    year = as_of.year
    opening = debit_month = credit_month = debit_ytd = credit_ytd = ZERO

    for posting in postings:
        if posting.date.year < year or posting.is_opening:
            opening += signed_amount(posting.account_type, posting.line)
            continue
        debit_ytd += posting.line.debit
        credit_ytd += posting.line.credit
        if posting.date.month == as_of.month:
            debit_month += posting.line.debit
            credit_month += posting.line.credit

    if debit_natural:
        ending = opening + debit_ytd - credit_ytd
    else:
        ending = opening + credit_ytd - debit_ytd

    return LedgerStats(
        opening_balance=opening,
        debit_month=debit_month,
        credit_month=credit_month,
        debit_ytd=debit_ytd,
        credit_ytd=credit_ytd,
        ending_balance=ending,
    )


def account_stats(
    account: Account, journal: Sequence[Transaction], as_of: date
) -> LedgerStats:
    """Compute ledger stats for one account as of a date.

    Balance-sheet accounts carry prior years into the opening balance. The
    latest active carry-forward entry dated in this year or earlier stands in
    for every year before it, so history it summarises is skipped. Income
    statement accounts start every year at zero.
    """
    year = as_of.year
    superseded = superseded_transaction_ids(journal)
    if account.account_type.is_balance_sheet:
        closing = latest_active_closing(journal, year, superseded)
        first_year = closing.date.year if closing is not None else None
    else:
        first_year = year

    def postings() -> Iterable[_Posting]:
        for txn in journal:
            if txn.date > as_of or txn.id in superseded:
                continue
            if first_year is not None and txn.date.year < first_year:
                continue
            opening = txn.date.year == year and is_opening_transaction(txn)
            for line in txn.lines:
                if line.account_id == account.id:
                    yield _Posting(txn.date, opening, line, account.account_type)

    return _accumulate(postings(), as_of, account.account_type.is_debit_natural)


def contact_stats(
    contact_id: int,
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    as_of: date,
    control_account_id: Optional[int] = None,
) -> LedgerStats:
    """Compute ledger stats for a customer or vendor as of a date.

    With a control account (the contact's receivable or payable account),
    only lines on that account count and its type decides the polarity.
    Without one, every asset and liability line of the contact's
    transactions counts, each signed by the polarity of the account it
    touches, and a contact with any liability line is a creditor whose
    ending balance is credit-natural.
    """
    accounts_by_id = {acc.id: acc for acc in accounts}
    superseded = superseded_transaction_ids(journal)
    postings: list[_Posting] = []
    is_creditor = False

    control = accounts_by_id.get(control_account_id) if control_account_id is not None else None
    if control is not None:
        is_creditor = not control.account_type.is_debit_natural

    for txn in journal:
        if txn.contact_id != contact_id or txn.id in superseded:
            continue
        opening = txn.date.year == as_of.year and is_opening_transaction(txn)
        for line in txn.lines:
            account = accounts_by_id.get(line.account_id)
            if account is None:
                continue
            if control is not None:
                if account.id != control.id:
                    continue
            elif account.account_type not in (AccountType.ASSET, AccountType.LIABILITY):
                continue
            elif account.account_type is AccountType.LIABILITY:
                is_creditor = True
            if txn.date <= as_of:
                postings.append(_Posting(txn.date, opening, line, account.account_type))

    return _accumulate(postings, as_of, debit_natural=not is_creditor)


def _latest_date(journal: Sequence[Transaction]) -> date:
    return max((txn.date for txn in journal), default=date.today())


def account_balance(
    account: Account, journal: Sequence[Transaction], as_of: Optional[date] = None
) -> Decimal:
    """Ending balance of an account as of a date.

    Without a date, the balance after the last journal entry is returned.
    """
    if as_of is None:
        as_of = _latest_date(journal)
    return account_stats(account, journal, as_of).ending_balance


def contact_balance(
    contact_id: int,
    journal: Sequence[Transaction],
    accounts: Sequence[Account],
    as_of: Optional[date] = None,
    control_account_id: Optional[int] = None,
) -> Decimal:
    """Ending balance of a contact as of a date (default: last entry)."""
    if as_of is None:
        as_of = _latest_date(journal)
    return contact_stats(
        contact_id, journal, accounts, as_of, control_account_id
    ).ending_balance


def change_over_window(
    account: Account, journal: Sequence[Transaction], start: date, end: date
) -> Decimal:
    """Net signed movement of an account with start <= date <= end."""
    window = DateWindow(start, end)
    superseded = superseded_transaction_ids(journal)
    total = ZERO
    for txn in journal:
        if txn.id in superseded or not window.contains(txn.date):
            continue
        for line in txn.lines:
            if line.account_id == account.id:
                total += signed_amount(account.account_type, line)
    return total


def trial_balance(
    journal: Sequence[Transaction], accounts: Sequence[Account], as_of: date
) -> list[tuple[Account, LedgerStats]]:
    """Stats for every account that has a balance or movement, by code."""
    rows = []
    for account in sorted(accounts, key=lambda acc: acc.code):
        stats = account_stats(account, journal, as_of)
        if stats == LedgerStats():
            continue
        rows.append((account, stats))
    return rows


class LedgerService:
    """Service for balance queries against the stored journal."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_account_stats(self, account_id: int, as_of: date) -> LedgerStats:
        """Get ledger stats for an account.

        Args:
            account_id: Account ID
            as_of: Cut-off date

        Returns:
            LedgerStats for the account

        Raises:
            NotFoundError: If the account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account_stats(account, self.db.list_transactions(end_date=as_of), as_of)

    def get_contact_stats(self, contact_id: int, as_of: date) -> LedgerStats:
        """Get ledger stats for a contact.

        The contact's control account, when it has one, limits the stats to
        its receivable or payable lines. Future transactions are loaded as
        well, because without a control account they decide whether the
        contact acts as a creditor.

        Raises:
            NotFoundError: If the contact doesn't exist
        """
        contact = self.db.get_contact(contact_id)
        if contact is None:
            raise NotFoundError(contact_not_found(contact_id))

        control_account_id = None
        if contact.gl_account_code:
            control = self.db.get_account_by_code(contact.gl_account_code)
            if control is not None:
                control_account_id = control.id

        return contact_stats(
            contact_id,
            self.db.list_transactions(contact_id=contact_id),
            self.db.list_accounts(),
            as_of,
            control_account_id,
        )

    def get_trial_balance(self, as_of: date) -> list[tuple[Account, LedgerStats]]:
        """Get the trial balance (Summen- und Saldenliste) as of a date."""
        return trial_balance(
            self.db.list_transactions(end_date=as_of), self.db.list_accounts(), as_of
        )
