"""Transfer domain service."""

import dataclasses
from typing import Optional
from datetime import date
from decimal import Decimal

from finledger.database.base import Database
from finledger.domain import balance
from finledger.domain.entities import Transfer as TransferEntity
from finledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    transfer_not_found,
)
from finledger.domain.validation import require_positive_amount
from finledger.utils.logging import get_logger

logger = get_logger(__name__)


class TransferService:
    """Service for transfers between two accounts of the same owner."""

    def __init__(self, db: Database):
        """Initialize transfer service.

        Args:
            db: Database instance
        """
        self.db = db

    def _lock_accounts(self, owner_id: str, *account_ids: int) -> None:
        # Sorted so two units touching the same pair lock in the same order
        for account_id in sorted(set(account_ids)):
            if self.db.get_account(account_id, owner_id, for_update=True) is None:
                raise NotFoundError(account_not_found(account_id))

    def create_transfer(
        self,
        owner_id: str,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal | int | str,
        date: date,
        description: Optional[str] = None,
        currency: str = "BRL",
    ) -> int:
        """Record a transfer, debiting the source and crediting the destination.

        Returns:
            Transfer ID

        Raises:
            InvalidTransferError: If source and destination are the same account
            ValidationError: If the amount is not positive or the date is missing
            NotFoundError: If either account doesn't exist for this owner
        """
        balance.validate_transfer_accounts(from_account_id, to_account_id)
        amount = require_positive_amount(amount)
        if date is None:
            raise ValidationError("Date is required")

        with self.db.atomic():
            self._lock_accounts(owner_id, from_account_id, to_account_id)
            transfer_id = self.db.create_transfer(
                owner_id=owner_id,
                from_account_id=from_account_id,
                to_account_id=to_account_id,
                amount=amount,
                date=date,
                description=description,
                currency=currency,
            )
            balance.apply_transfer(self.db, self.db.get_transfer(transfer_id, owner_id))

        logger.info(
            "transfer_created",
            owner_id=owner_id,
            transfer_id=transfer_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=str(amount),
        )
        return transfer_id

    def get_transfer(self, owner_id: str, transfer_id: int) -> Optional[TransferEntity]:
        """Get transfer by ID, or None if missing or owned by someone else."""
        return self.db.get_transfer(transfer_id, owner_id)

    def require_transfer(self, owner_id: str, transfer_id: int) -> TransferEntity:
        """Get transfer by ID.

        Raises:
            NotFoundError: If the transfer does not exist for this owner
        """
        transfer = self.db.get_transfer(transfer_id, owner_id)
        if transfer is None:
            raise NotFoundError(transfer_not_found(transfer_id))
        return transfer

    def update_transfer(
        self,
        owner_id: str,
        transfer_id: int,
        from_account_id: Optional[int] = None,
        to_account_id: Optional[int] = None,
        amount: Optional[Decimal | int | str] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> TransferEntity:
        """Update a transfer, reversing the old effects and applying the new ones.

        Returns:
            The updated transfer

        Raises:
            InvalidTransferError: If the update makes both sides the same account
            ValidationError: If the amount is not positive
            NotFoundError: If the transfer or an account doesn't exist
        """
        changes: dict[str, object] = {}
        if from_account_id is not None:
            changes["from_account_id"] = from_account_id
        if to_account_id is not None:
            changes["to_account_id"] = to_account_id
        if amount is not None:
            changes["amount"] = require_positive_amount(amount)
        if date is not None:
            changes["date"] = date
        if description is not None:
            changes["description"] = description
        if currency is not None:
            changes["currency"] = currency

        with self.db.atomic():
            old_tr = self.require_transfer(owner_id, transfer_id)
            new_tr = dataclasses.replace(old_tr, **changes)
            balance.validate_transfer_accounts(new_tr.from_account_id, new_tr.to_account_id)
            self._lock_accounts(
                owner_id,
                old_tr.from_account_id,
                old_tr.to_account_id,
                new_tr.from_account_id,
                new_tr.to_account_id,
            )
            if changes:
                self.db.update_transfer(transfer_id, **changes)
            balance.reapply_transfer(self.db, old_tr, new_tr)
            updated = self.require_transfer(owner_id, transfer_id)

        logger.info(
            "transfer_updated",
            owner_id=owner_id,
            transfer_id=transfer_id,
            old_amount=str(old_tr.amount),
            new_amount=str(updated.amount),
            from_account_id=updated.from_account_id,
            to_account_id=updated.to_account_id,
        )
        return updated

    def delete_transfer(self, owner_id: str, transfer_id: int) -> None:
        """Delete a transfer and reverse both balance effects.

        Raises:
            NotFoundError: If the transfer doesn't exist for this owner
        """
        with self.db.atomic():
            transfer = self.require_transfer(owner_id, transfer_id)
            self._lock_accounts(owner_id, transfer.from_account_id, transfer.to_account_id)
            self.db.delete_transfer(transfer_id)
            balance.reverse_transfer(self.db, transfer)

        logger.info(
            "transfer_deleted",
            owner_id=owner_id,
            transfer_id=transfer_id,
            amount=str(transfer.amount),
        )

    def list_transfers(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[TransferEntity]:
        """List the owner's transfers, newest first; account_id matches either side."""
        return self.db.list_transfers(owner_id, start_date=start_date, end_date=end_date, account_id=account_id)
