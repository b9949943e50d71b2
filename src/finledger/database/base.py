"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain services
from finledger.domain.entities import (
    Account,
    Category,
    Transaction,
    Transfer,
    Goal,
    GoalContribution,
)


class Database(ABC):
    """Abstract database interface for finledger.

    Getters take an owner_id and return None for rows owned by someone else.
    Writers never commit on their own: callers group them in atomic().
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open a unit of work.

        Re-entrant: only the outermost block commits, and any exception
        rolls back everything written since it was entered. Units of work
        on the same database are serialized.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: str,
        name: str,
        account_type: str,
        initial_balance: Decimal,
        bank_name: Optional[str] = None,
        color: Optional[str] = None,
        is_active: bool = True,
    ) -> int:
        """Create an account with current_balance = initial_balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int, owner_id: str, for_update: bool = False) -> Optional[Account]:
        """Get account by ID, optionally locking its row until the unit of work ends."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: str, active_only: bool = False) -> list[Account]:
        """List accounts of an owner ordered by name."""
        pass

    @abstractmethod
    def update_account(self, account_id: int, **changes: Any) -> None:
        """Update descriptive account fields (name, account_type, bank_name, color, is_active)."""
        pass

    @abstractmethod
    def adjust_account_balance(self, account_id: int, delta: Decimal) -> Decimal:
        """Add delta to an account's current balance in the database. Returns the new balance."""
        pass

    @abstractmethod
    def set_account_balance(self, account_id: int, balance: Decimal) -> None:
        """Overwrite an account's current balance (reconciliation only)."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account together with its transactions and transfers."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        owner_id: str,
        name: str,
        category_type: str,
        parent_id: Optional[int] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int, owner_id: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, owner_id: str, category_type: Optional[str] = None) -> list[Category]:
        """List categories, optionally filtered by type."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category, clearing references to it."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        owner_id: str,
        account_id: int,
        transaction_type: str,
        amount: Decimal,
        date: date,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        payment_method: Optional[str] = None,
        recurrence: str = "none",
        notes: Optional[str] = None,
        currency: str = "BRL",
    ) -> int:
        """Create a transaction record. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, owner_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **changes: Any) -> None:
        """Update transaction fields."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction record."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        pass

    # Transfer operations
    @abstractmethod
    def create_transfer(
        self,
        owner_id: str,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal,
        date: date,
        description: Optional[str] = None,
        currency: str = "BRL",
    ) -> int:
        """Create a transfer record. Returns transfer ID."""
        pass

    @abstractmethod
    def get_transfer(self, transfer_id: int, owner_id: str) -> Optional[Transfer]:
        """Get transfer by ID."""
        pass

    @abstractmethod
    def update_transfer(self, transfer_id: int, **changes: Any) -> None:
        """Update transfer fields."""
        pass

    @abstractmethod
    def delete_transfer(self, transfer_id: int) -> None:
        """Delete a transfer record."""
        pass

    @abstractmethod
    def list_transfers(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[Transfer]:
        """List transfers, newest first. account_id matches either side."""
        pass

    # Goal operations
    @abstractmethod
    def create_goal(
        self,
        owner_id: str,
        name: str,
        target_amount: Decimal,
        current_amount: Decimal,
        status: str,
        is_completed: bool,
        description: Optional[str] = None,
        deadline: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a goal. Returns goal ID."""
        pass

    @abstractmethod
    def get_goal(self, goal_id: int, owner_id: str, for_update: bool = False) -> Optional[Goal]:
        """Get goal by ID, optionally locking its row."""
        pass

    @abstractmethod
    def list_goals(self, owner_id: str, status: Optional[str] = None) -> list[Goal]:
        """List goals, newest first."""
        pass

    @abstractmethod
    def update_goal(self, goal_id: int, **changes: Any) -> None:
        """Update goal fields."""
        pass

    @abstractmethod
    def adjust_goal_amount(self, goal_id: int, delta: Decimal) -> Decimal:
        """Add delta to a goal's current amount in the database, floored at zero. Returns the new amount."""
        pass

    @abstractmethod
    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal and its contributions."""
        pass

    # Goal contribution operations
    @abstractmethod
    def create_contribution(
        self,
        owner_id: str,
        goal_id: int,
        amount: Decimal,
        date: date,
        account_id: Optional[int] = None,
        transaction_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a contribution record. Returns contribution ID."""
        pass

    @abstractmethod
    def get_contribution(self, contribution_id: int, owner_id: str) -> Optional[GoalContribution]:
        """Get contribution by ID."""
        pass

    @abstractmethod
    def delete_contribution(self, contribution_id: int) -> None:
        """Delete a contribution record."""
        pass

    @abstractmethod
    def list_contributions(
        self,
        owner_id: str,
        goal_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> list[GoalContribution]:
        """List contributions filtered by goal and/or source account, newest first."""
        pass
