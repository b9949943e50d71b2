"""Utility for resolving account names to IDs."""

from finledger.domain.account import AccountService
from finledger.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, owner_id: str, account: str | int) -> int:
    """Resolve an account name or ID to an account ID owned by owner_id.

    Args:
        account_service: AccountService instance
        owner_id: Owner whose accounts are searched
        account: Account name, or ID as int or numeric string

    Returns:
        Account ID

    Raises:
        NotFoundError: If no matching account belongs to the owner
    """
    if isinstance(account, int):
        return account_service.require_account(owner_id, account).id

    # Numeric strings are IDs
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None:
        return account_service.require_account(owner_id, account_id).id

    for acc in account_service.list_accounts(owner_id):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
