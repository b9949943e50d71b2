"""Goal and goal contribution domain service."""

import datetime
from datetime import date
from decimal import Decimal
from typing import Optional

from finledger.database.base import Database
from finledger.domain import balance
from finledger.domain.entities import (
    GOAL_ACTIVE,
    GOAL_COMPLETED,
    GOAL_STATUSES,
    Goal as GoalEntity,
    GoalContribution as GoalContributionEntity,
    GoalProgress,
)
from finledger.domain.errors import (
    InsufficientBalanceError,
    NotFoundError,
    account_not_found,
    category_not_found,
    contribution_not_found,
    goal_not_found,
    insufficient_balance,
    transaction_not_found,
)
from finledger.domain.validation import (
    require_choice,
    require_non_negative_amount,
    require_positive_amount,
    require_text,
)
from finledger.utils.logging import get_logger

logger = get_logger(__name__)

HUNDRED = Decimal("100")


class GoalService:
    """Service for savings goals and the contributions that fund them.

    A contribution moves money out of an account and into a goal's
    accumulated amount; both sides change in the same unit of work.
    """

    def __init__(self, db: Database):
        """Initialize goal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_goal(
        self,
        owner_id: str,
        name: str,
        target_amount: Decimal | int | str,
        current_amount: Decimal | int | str = Decimal("0"),
        description: Optional[str] = None,
        deadline: Optional[date] = None,
        category_id: Optional[int] = None,
        status: str = GOAL_ACTIVE,
    ) -> int:
        """Create a goal.

        Args:
            owner_id: Owner of the goal
            name: Goal name
            target_amount: Positive amount to reach
            current_amount: Starting amount, zero or more
            description: Optional description
            deadline: Optional target date
            category_id: Optional category
            status: active, completed or paused

        Returns:
            Goal ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the category doesn't exist for this owner
        """
        name = require_text(name, "name")
        target = require_positive_amount(target_amount, "target_amount")
        current = require_non_negative_amount(current_amount, "current_amount")
        require_choice(status, GOAL_STATUSES, "status")

        with self.db.atomic():
            if category_id is not None and self.db.get_category(category_id, owner_id) is None:
                raise NotFoundError(category_not_found(category_id))
            goal_id = self.db.create_goal(
                owner_id=owner_id,
                name=name,
                target_amount=target,
                current_amount=current,
                status=status,
                is_completed=status == GOAL_COMPLETED,
                description=description,
                deadline=deadline,
                category_id=category_id,
            )
        logger.info("goal_created", owner_id=owner_id, goal_id=goal_id, target_amount=str(target))
        return goal_id

    def get_goal(self, owner_id: str, goal_id: int) -> Optional[GoalEntity]:
        """Get goal by ID, or None if missing or owned by someone else."""
        return self.db.get_goal(goal_id, owner_id)

    def require_goal(self, owner_id: str, goal_id: int) -> GoalEntity:
        """Get goal by ID.

        Raises:
            NotFoundError: If the goal does not exist for this owner
        """
        goal = self.db.get_goal(goal_id, owner_id)
        if goal is None:
            raise NotFoundError(goal_not_found(goal_id))
        return goal

    def list_goals(self, owner_id: str, status: Optional[str] = None) -> list[GoalEntity]:
        """List the owner's goals, newest first."""
        if status is not None:
            require_choice(status, GOAL_STATUSES, "status")
        return self.db.list_goals(owner_id, status=status)

    def update_goal(
        self,
        owner_id: str,
        goal_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        target_amount: Optional[Decimal | int | str] = None,
        deadline: Optional[date] = None,
        category_id: Optional[int] = None,
        status: Optional[str] = None,
        clear_deadline: bool = False,
    ) -> GoalEntity:
        """Update descriptive goal fields or set its status by hand.

        The accumulated amount is never edited here. Setting a status keeps
        is_completed in step with it.

        Returns:
            The updated goal
        """
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = require_text(name, "name")
        if description is not None:
            changes["description"] = description
        if target_amount is not None:
            changes["target_amount"] = require_positive_amount(target_amount, "target_amount")
        if clear_deadline:
            changes["deadline"] = None
        elif deadline is not None:
            changes["deadline"] = deadline
        if category_id is not None:
            changes["category_id"] = category_id
        if status is not None:
            changes["status"] = require_choice(status, GOAL_STATUSES, "status")
            changes["is_completed"] = status == GOAL_COMPLETED

        with self.db.atomic():
            self.require_goal(owner_id, goal_id)
            if category_id is not None and self.db.get_category(category_id, owner_id) is None:
                raise NotFoundError(category_not_found(category_id))
            if changes:
                self.db.update_goal(goal_id, **changes)
            return self.require_goal(owner_id, goal_id)

    def delete_goal(self, owner_id: str, goal_id: int) -> None:
        """Delete a goal and its contributions, refunding their source accounts.

        Raises:
            NotFoundError: If the goal doesn't exist for this owner
        """
        with self.db.atomic():
            self.require_goal(owner_id, goal_id)
            contributions = self.db.list_contributions(owner_id, goal_id=goal_id)
            for contribution in contributions:
                if contribution.account_id is not None:
                    self.db.adjust_account_balance(contribution.account_id, contribution.amount)
            self.db.delete_goal(goal_id)
        logger.info(
            "goal_deleted",
            owner_id=owner_id,
            goal_id=goal_id,
            refunded=str(sum((c.amount for c in contributions if c.account_id is not None), Decimal("0.00"))),
        )

    def add_contribution(
        self,
        owner_id: str,
        goal_id: int,
        account_id: int,
        amount: Decimal | int | str,
        date: Optional[date] = None,
        description: Optional[str] = None,
        transaction_id: Optional[int] = None,
    ) -> int:
        """Move money from an account into a goal.

        The account row is locked before its balance is checked, so two
        contributions from the same account cannot both pass the check
        against the same balance. The goal becomes completed once its amount
        reaches the target, and active otherwise.

        Args:
            owner_id: Acting owner
            goal_id: Goal being funded
            account_id: Source account
            amount: Positive amount
            date: Contribution date (defaults to today)
            description: Optional description
            transaction_id: Optional transaction to link

        Returns:
            Contribution ID

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the goal, account or linked transaction doesn't exist
            InsufficientBalanceError: If the account balance is below the amount
        """
        amount = require_positive_amount(amount)
        contribution_date = date or datetime.date.today()

        with self.db.atomic():
            account = self.db.get_account(account_id, owner_id, for_update=True)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            goal = self.db.get_goal(goal_id, owner_id, for_update=True)
            if goal is None:
                raise NotFoundError(goal_not_found(goal_id))
            if transaction_id is not None and self.db.get_transaction(transaction_id, owner_id) is None:
                raise NotFoundError(transaction_not_found(transaction_id))

            if amount > account.current_balance:
                logger.warning(
                    "contribution_rejected",
                    owner_id=owner_id,
                    goal_id=goal_id,
                    account_id=account_id,
                    balance=str(account.current_balance),
                    amount=str(amount),
                )
                raise InsufficientBalanceError(insufficient_balance(account.name, account.current_balance, amount))

            contribution_id = self.db.create_contribution(
                owner_id=owner_id,
                goal_id=goal_id,
                amount=amount,
                date=contribution_date,
                account_id=account_id,
                transaction_id=transaction_id,
                description=description,
            )
            self.db.adjust_account_balance(account_id, -amount)

            new_amount = self.db.adjust_goal_amount(goal_id, amount)
            status, is_completed = balance.evaluate_goal_status(new_amount, goal.target_amount)
            self.db.update_goal(goal_id, status=status, is_completed=is_completed)

        logger.info(
            "contribution_added",
            owner_id=owner_id,
            contribution_id=contribution_id,
            goal_id=goal_id,
            account_id=account_id,
            amount=str(amount),
            goal_amount=str(new_amount),
            status=status,
        )
        return contribution_id

    def remove_contribution(self, owner_id: str, contribution_id: int) -> None:
        """Withdraw a contribution from its goal and refund the source account.

        The goal always goes back to active, even if what remains still meets
        the target.

        Raises:
            NotFoundError: If the contribution doesn't exist for this owner
        """
        with self.db.atomic():
            contribution = self.db.get_contribution(contribution_id, owner_id)
            if contribution is None:
                raise NotFoundError(contribution_not_found(contribution_id))

            if contribution.account_id is not None:
                self.db.adjust_account_balance(contribution.account_id, contribution.amount)
            self.db.delete_contribution(contribution_id)

            goal = self.db.get_goal(contribution.goal_id, owner_id, for_update=True)
            if goal is None:
                raise NotFoundError(goal_not_found(contribution.goal_id))
            new_amount = self.db.adjust_goal_amount(goal.id, -contribution.amount)
            self.db.update_goal(goal.id, status=GOAL_ACTIVE, is_completed=False)

        logger.info(
            "contribution_removed",
            owner_id=owner_id,
            contribution_id=contribution_id,
            goal_id=contribution.goal_id,
            account_id=contribution.account_id,
            amount=str(contribution.amount),
            goal_amount=str(new_amount),
        )

    def list_contributions(self, owner_id: str, goal_id: int) -> list[GoalContributionEntity]:
        """List a goal's contributions, newest first."""
        self.require_goal(owner_id, goal_id)
        return self.db.list_contributions(owner_id, goal_id=goal_id)

    def list_account_contributions(self, owner_id: str, account_id: int) -> list[GoalContributionEntity]:
        """List contributions drawn from an account, newest first."""
        if self.db.get_account(account_id, owner_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return self.db.list_contributions(owner_id, account_id=account_id)

    def get_progress(self, owner_id: str, goal_id: int, today: Optional[date] = None) -> GoalProgress:
        """Percentage reached (capped at 100), amount remaining and days to the deadline."""
        goal = self.require_goal(owner_id, goal_id)
        percentage = min(HUNDRED, (goal.current_amount / goal.target_amount * HUNDRED).quantize(Decimal("0.01")))
        remaining = max(Decimal("0.00"), goal.target_amount - goal.current_amount)
        days_left = None
        if goal.deadline is not None:
            days_left = (goal.deadline - (today or datetime.date.today())).days
        return GoalProgress(goal_id=goal.id, percentage=percentage, remaining=remaining, days_left=days_left)
