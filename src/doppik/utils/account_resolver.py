"""Utility for resolving account codes or IDs to accounts."""

from doppik.domain.account import AccountService
from doppik.domain.entities import Account
from doppik.domain.errors import NotFoundError, account_code_not_found


def resolve_account(account_service: AccountService, account: str | int) -> Account:
    """Resolve an account code or ID to an account.

    Codes take precedence: "1200000" is looked up as a code first and only
    then as an ID.

    Args:
        account_service: AccountService instance
        account: Account code, or ID (int or string representation of int)

    Returns:
        Account entity

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int):
        account_obj = account_service.get_account(account)
        if account_obj is None:
            raise NotFoundError(f"Account ID {account} not found")
        return account_obj

    reference = account.strip()
    account_obj = account_service.get_account_by_code(reference)
    if account_obj is not None:
        return account_obj

    if reference.isdigit():
        account_obj = account_service.get_account(int(reference))
        if account_obj is not None:
            return account_obj

    raise NotFoundError(account_code_not_found(reference))
