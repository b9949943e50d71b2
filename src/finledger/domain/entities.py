"""Domain model entities for finledger.

These are pure data classes representing business concepts, independent of
database schema. Balance rules and services only ever see these objects,
never ORM rows.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional


ACCOUNT_TYPES = ("checking", "savings", "wallet", "credit_card")
TRANSACTION_TYPES = ("income", "expense")
RECURRENCE_TYPES = ("none", "daily", "weekly", "monthly", "yearly")
GOAL_STATUSES = ("active", "completed", "paused")

INCOME = "income"
EXPENSE = "expense"
GOAL_ACTIVE = "active"
GOAL_COMPLETED = "completed"
GOAL_PAUSED = "paused"


@dataclass(frozen=True)
class Account:
    """Ledger account holding a running balance."""

    id: int
    owner_id: str
    name: str
    account_type: str
    bank_name: Optional[str]
    initial_balance: Decimal
    current_balance: Decimal
    color: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Category:
    """Income or expense category, optionally nested under a parent."""

    id: int
    owner_id: str
    name: str
    category_type: str
    color: str
    icon: str
    parent_id: Optional[int]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Income or expense event on a single account."""

    id: int
    owner_id: str
    account_id: int
    category_id: Optional[int]
    transaction_type: str
    amount: Decimal
    date: date
    description: Optional[str]
    payment_method: Optional[str]
    recurrence: str
    notes: Optional[str]
    currency: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transfer:
    """Movement of funds between two accounts of the same owner."""

    id: int
    owner_id: str
    from_account_id: int
    to_account_id: int
    amount: Decimal
    date: date
    description: Optional[str]
    currency: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Goal:
    """Savings target with an accumulated amount."""

    id: int
    owner_id: str
    name: str
    description: Optional[str]
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date]
    category_id: Optional[int]
    status: str
    is_completed: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class GoalContribution:
    """Funding event moving money from an account into a goal."""

    id: int
    owner_id: str
    goal_id: int
    account_id: Optional[int]
    transaction_id: Optional[int]
    amount: Decimal
    date: date
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StatementEntry:
    """One line of an account statement."""

    date: date
    kind: str
    reference_id: int
    description: Optional[str]
    amount: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GoalProgress:
    """Derived progress figures for a goal."""

    goal_id: int
    percentage: Decimal
    remaining: Decimal
    days_left: Optional[int]


@dataclass(frozen=True)
class Overview:
    """Dashboard totals for a period."""

    total_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    transaction_count: int


@dataclass(frozen=True)
class MonthlyTotals:
    """Income and expense totals for one calendar month."""

    year: int
    month: int
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class CategoryTotal:
    """Total for one category in a breakdown."""

    category_id: Optional[int]
    category_name: str
    total: Decimal
    count: int


@dataclass(frozen=True)
class ReconciliationResult:
    """Stored versus recomputed balance for one account."""

    account_id: int
    stored_balance: Decimal
    expected_balance: Decimal
    difference: Decimal
    corrected: bool
