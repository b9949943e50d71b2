"""Balance rules keeping account balances and goal amounts consistent.

Each rule turns one recorded event into the balance mutations it implies.
Updates are always computed as "reverse the old event, apply the new one",
never as a diff, so a change of account is handled the same way as a change
of amount. The rules never commit: callers run them inside Database.atomic()
together with the record mutation they belong to.
"""

from decimal import Decimal

from finledger.database.base import Database
from finledger.domain.entities import (
    Transaction,
    Transfer,
    INCOME,
    GOAL_ACTIVE,
    GOAL_COMPLETED,
)
from finledger.domain.errors import InvalidTransferError, same_account_transfer


# Transactions

def transaction_effect(tx: Transaction) -> Decimal:
    """Signed effect of a transaction on its account."""
    return tx.amount if tx.transaction_type == INCOME else -tx.amount


def apply_transaction(db: Database, tx: Transaction) -> None:
    """Apply a new transaction to its account."""
    db.adjust_account_balance(tx.account_id, transaction_effect(tx))


def reverse_transaction(db: Database, tx: Transaction) -> None:
    """Undo a transaction's effect on its account."""
    db.adjust_account_balance(tx.account_id, -transaction_effect(tx))


def reapply_transaction(db: Database, old_tx: Transaction, new_tx: Transaction) -> None:
    """Move a transaction's effect from its old state to its new state."""
    reverse_transaction(db, old_tx)
    apply_transaction(db, new_tx)


# Transfers

def validate_transfer_accounts(from_account_id: int, to_account_id: int) -> None:
    """Reject transfers from an account to itself."""
    if from_account_id == to_account_id:
        raise InvalidTransferError(same_account_transfer(from_account_id))


def transfer_effects(tr: Transfer) -> dict[int, Decimal]:
    """Per-account signed effects of a transfer; they always sum to zero."""
    return {tr.from_account_id: -tr.amount, tr.to_account_id: tr.amount}


def apply_transfer(db: Database, tr: Transfer) -> None:
    """Debit the source account and credit the destination."""
    db.adjust_account_balance(tr.from_account_id, -tr.amount)
    db.adjust_account_balance(tr.to_account_id, tr.amount)


def reverse_transfer(db: Database, tr: Transfer) -> None:
    """Credit the source account and debit the destination."""
    db.adjust_account_balance(tr.from_account_id, tr.amount)
    db.adjust_account_balance(tr.to_account_id, -tr.amount)


def reapply_transfer(db: Database, old_tr: Transfer, new_tr: Transfer) -> None:
    """Move a transfer's effects from its old state to its new state."""
    reverse_transfer(db, old_tr)
    apply_transfer(db, new_tr)


# Goals

def evaluate_goal_status(current_amount: Decimal, target_amount: Decimal) -> tuple[str, bool]:
    """Status and completion flag for a goal after a contribution."""
    if current_amount >= target_amount:
        return GOAL_COMPLETED, True
    return GOAL_ACTIVE, False
