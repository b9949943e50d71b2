"""Mapper functions to convert between SQLAlchemy rows and domain entities.

This layer isolates the conversion logic so balance rules and services never
hold live ORM objects outside a unit of work.
"""

from decimal import Decimal
from typing import Optional

from finledger.domain import entities as domain
from finledger.utils.amount_parser import quantize_amount
from finledger.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Transfer as ORMTransfer,
    Goal as ORMGoal,
    GoalContribution as ORMGoalContribution,
)


def _money(value: Optional[Decimal]) -> Decimal:
    # SQLite hands numerics back through float; pin them to cents again.
    return quantize_amount(Decimal(str(value)) if value is not None else Decimal("0"))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        bank_name=orm_account.bank_name,
        initial_balance=_money(orm_account.initial_balance),
        current_balance=_money(orm_account.current_balance),
        color=orm_account.color,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        owner_id=orm_category.owner_id,
        name=orm_category.name,
        category_type=orm_category.category_type,
        color=orm_category.color,
        icon=orm_category.icon,
        parent_id=orm_category.parent_id,
        is_active=orm_category.is_active,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        account_id=orm_transaction.account_id,
        category_id=orm_transaction.category_id,
        transaction_type=orm_transaction.transaction_type,
        amount=_money(orm_transaction.amount),
        date=orm_transaction.date,
        description=orm_transaction.description,
        payment_method=orm_transaction.payment_method,
        recurrence=orm_transaction.recurrence,
        notes=orm_transaction.notes,
        currency=orm_transaction.currency,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def transfer_to_domain(orm_transfer: ORMTransfer) -> domain.Transfer:
    """Convert SQLAlchemy Transfer model to domain Transfer entity."""
    return domain.Transfer(
        id=orm_transfer.id,
        owner_id=orm_transfer.owner_id,
        from_account_id=orm_transfer.from_account_id,
        to_account_id=orm_transfer.to_account_id,
        amount=_money(orm_transfer.amount),
        date=orm_transfer.date,
        description=orm_transfer.description,
        currency=orm_transfer.currency,
        created_at=orm_transfer.created_at,
        updated_at=orm_transfer.updated_at,
    )


def goal_to_domain(orm_goal: ORMGoal) -> domain.Goal:
    """Convert SQLAlchemy Goal model to domain Goal entity."""
    return domain.Goal(
        id=orm_goal.id,
        owner_id=orm_goal.owner_id,
        name=orm_goal.name,
        description=orm_goal.description,
        target_amount=_money(orm_goal.target_amount),
        current_amount=_money(orm_goal.current_amount),
        deadline=orm_goal.deadline,
        category_id=orm_goal.category_id,
        status=orm_goal.status,
        is_completed=orm_goal.is_completed,
        created_at=orm_goal.created_at,
        updated_at=orm_goal.updated_at,
    )


def contribution_to_domain(orm_contribution: ORMGoalContribution) -> domain.GoalContribution:
    """Convert SQLAlchemy GoalContribution model to domain GoalContribution entity."""
    return domain.GoalContribution(
        id=orm_contribution.id,
        owner_id=orm_contribution.owner_id,
        goal_id=orm_contribution.goal_id,
        account_id=orm_contribution.account_id,
        transaction_id=orm_contribution.transaction_id,
        amount=_money(orm_contribution.amount),
        date=orm_contribution.date,
        description=orm_contribution.description,
        created_at=orm_contribution.created_at,
        updated_at=orm_contribution.updated_at,
    )
