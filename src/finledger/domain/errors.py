"""Ledger error types and the messages they carry."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for every error a ledger operation reports to its caller.

    Validation, not-found and insufficient-balance errors are raised before
    anything is written; InconsistencyError is raised after a rollback.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidTransferError(ValidationError):
    """Transfer whose source and destination accounts are the same."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the caller."""


class InsufficientBalanceError(DomainError):
    """Source account cannot cover the requested amount."""


class InconsistencyError(DomainError):
    """A unit of work failed midway and was rolled back."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def transfer_not_found(transfer_id: int) -> str:
    """Return message for missing transfer."""
    return f"Transfer {transfer_id} not found"


def goal_not_found(goal_id: int) -> str:
    """Return message for missing goal."""
    return f"Goal {goal_id} not found"


def contribution_not_found(contribution_id: int) -> str:
    """Return message for missing goal contribution."""
    return f"Contribution {contribution_id} not found"


def same_account_transfer(account_id: int) -> str:
    """Return message for a transfer from an account to itself."""
    return f"Cannot transfer from account {account_id} to itself"


def insufficient_balance(account_name: str, balance: Decimal, amount: Decimal) -> str:
    """Return message when an account cannot cover an amount."""
    return (
        f"Insufficient balance in account '{account_name}': "
        f"{balance:,.2f} available, {amount:,.2f} requested"
    )


def invalid_choice(field: str, value: str, choices: tuple[str, ...]) -> str:
    """Return message for a value outside its allowed set."""
    return f"Invalid {field} '{value}'. Expected one of: {', '.join(choices)}"
