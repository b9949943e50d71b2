"""Transaction domain service."""

import dataclasses
from typing import Optional
from datetime import date
from decimal import Decimal

from finledger.database.base import Database
from finledger.domain import balance
from finledger.domain.entities import (
    RECURRENCE_TYPES,
    TRANSACTION_TYPES,
    Transaction as TransactionEntity,
)
from finledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    transaction_not_found,
)
from finledger.domain.validation import require_choice, require_positive_amount
from finledger.utils.logging import get_logger

logger = get_logger(__name__)


class TransactionService:
    """Service for income and expense transactions.

    Every mutation runs the record change and the account balance change in
    one unit of work.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_references(
        self, owner_id: str, account_id: int, category_id: Optional[int], transaction_type: str
    ) -> None:
        if self.db.get_account(account_id, owner_id, for_update=True) is None:
            raise NotFoundError(account_not_found(account_id))
        if category_id is not None:
            category = self.db.get_category(category_id, owner_id)
            if category is None:
                raise NotFoundError(category_not_found(category_id))
            if category.category_type != transaction_type:
                raise ValidationError(
                    f"Category '{category.name}' cannot be used for {transaction_type} transactions"
                )

    def create_transaction(
        self,
        owner_id: str,
        account_id: int,
        transaction_type: str,
        amount: Decimal | int | str,
        date: date,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        payment_method: Optional[str] = None,
        recurrence: str = "none",
        notes: Optional[str] = None,
        currency: str = "BRL",
    ) -> int:
        """Record a transaction and apply it to the account balance.

        Args:
            owner_id: Acting owner
            account_id: Account the money goes in or out of
            transaction_type: "income" or "expense"
            amount: Positive amount; the type decides the sign
            date: Transaction date
            category_id: Optional category of the same type
            description: Optional description
            payment_method: Optional payment method label
            recurrence: Informational recurrence tag
            notes: Optional notes
            currency: Currency code

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the account or category doesn't exist for this owner
        """
        require_choice(transaction_type, TRANSACTION_TYPES, "transaction_type")
        require_choice(recurrence, RECURRENCE_TYPES, "recurrence")
        amount = require_positive_amount(amount)
        if date is None:
            raise ValidationError("Date is required")

        with self.db.atomic():
            self._check_references(owner_id, account_id, category_id, transaction_type)
            transaction_id = self.db.create_transaction(
                owner_id=owner_id,
                account_id=account_id,
                transaction_type=transaction_type,
                amount=amount,
                date=date,
                category_id=category_id,
                description=description,
                payment_method=payment_method,
                recurrence=recurrence,
                notes=notes,
                currency=currency,
            )
            balance.apply_transaction(self.db, self.db.get_transaction(transaction_id, owner_id))

        logger.info(
            "transaction_created",
            owner_id=owner_id,
            transaction_id=transaction_id,
            account_id=account_id,
            transaction_type=transaction_type,
            amount=str(amount),
        )
        return transaction_id

    def get_transaction(self, owner_id: str, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID, or None if missing or owned by someone else."""
        return self.db.get_transaction(transaction_id, owner_id)

    def require_transaction(self, owner_id: str, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction does not exist for this owner
        """
        txn = self.db.get_transaction(transaction_id, owner_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(
        self,
        owner_id: str,
        transaction_id: int,
        account_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
        amount: Optional[Decimal | int | str] = None,
        date: Optional[date] = None,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        payment_method: Optional[str] = None,
        recurrence: Optional[str] = None,
        notes: Optional[str] = None,
        currency: Optional[str] = None,
        clear_category: bool = False,
    ) -> TransactionEntity:
        """Update a transaction and move its balance effect.

        Only the fields that are provided change. The old effect is reversed on
        the old account and the new effect applied on the (possibly different)
        new account.

        Args:
            clear_category: If True, remove the category (category_id must be None)

        Returns:
            The updated transaction

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the transaction, account or category doesn't exist
        """
        if clear_category and category_id is not None:
            raise ValidationError("Cannot set both category_id and clear_category")

        changes: dict[str, object] = {}
        if account_id is not None:
            changes["account_id"] = account_id
        if transaction_type is not None:
            changes["transaction_type"] = require_choice(transaction_type, TRANSACTION_TYPES, "transaction_type")
        if amount is not None:
            changes["amount"] = require_positive_amount(amount)
        if date is not None:
            changes["date"] = date
        if clear_category:
            changes["category_id"] = None
        elif category_id is not None:
            changes["category_id"] = category_id
        if description is not None:
            changes["description"] = description
        if payment_method is not None:
            changes["payment_method"] = payment_method
        if recurrence is not None:
            changes["recurrence"] = require_choice(recurrence, RECURRENCE_TYPES, "recurrence")
        if notes is not None:
            changes["notes"] = notes
        if currency is not None:
            changes["currency"] = currency

        with self.db.atomic():
            old_tx = self.require_transaction(owner_id, transaction_id)
            new_tx = dataclasses.replace(old_tx, **changes)
            self._check_references(owner_id, new_tx.account_id, new_tx.category_id, new_tx.transaction_type)
            if new_tx.account_id != old_tx.account_id:
                # Lock both sides before moving money between them
                self.db.get_account(old_tx.account_id, owner_id, for_update=True)
            if changes:
                self.db.update_transaction(transaction_id, **changes)
            balance.reapply_transaction(self.db, old_tx, new_tx)
            updated = self.require_transaction(owner_id, transaction_id)

        logger.info(
            "transaction_updated",
            owner_id=owner_id,
            transaction_id=transaction_id,
            old_account_id=old_tx.account_id,
            new_account_id=updated.account_id,
            old_effect=str(balance.transaction_effect(old_tx)),
            new_effect=str(balance.transaction_effect(updated)),
        )
        return updated

    def delete_transaction(self, owner_id: str, transaction_id: int) -> None:
        """Delete a transaction and reverse its balance effect.

        Raises:
            NotFoundError: If the transaction doesn't exist for this owner
        """
        with self.db.atomic():
            txn = self.require_transaction(owner_id, transaction_id)
            self.db.get_account(txn.account_id, owner_id, for_update=True)
            self.db.delete_transaction(transaction_id)
            balance.reverse_transaction(self.db, txn)

        logger.info(
            "transaction_deleted",
            owner_id=owner_id,
            transaction_id=transaction_id,
            account_id=txn.account_id,
            reversed_effect=str(-balance.transaction_effect(txn)),
        )

    def list_transactions(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List the owner's transactions, newest first, with optional filters."""
        if transaction_type is not None:
            require_choice(transaction_type, TRANSACTION_TYPES, "transaction_type")
        return self.db.list_transactions(
            owner_id,
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            category_id=category_id,
            transaction_type=transaction_type,
        )
