"""Account domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from finledger.database.base import Database
from finledger.domain import balance
from finledger.domain.entities import (
    ACCOUNT_TYPES,
    Account as AccountEntity,
    ReconciliationResult,
    StatementEntry,
)
from finledger.domain.errors import NotFoundError, ValidationError, account_not_found
from finledger.domain.validation import require_choice, require_text
from finledger.utils.amount_parser import quantize_amount
from finledger.utils.logging import get_logger

logger = get_logger(__name__)

# Same-day statement entries are listed in this order
_STATEMENT_ORDER = {"transaction": 0, "transfer_in": 1, "transfer_out": 2, "contribution": 3}


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_unique_name(self, owner_id: str, name: str, exclude_id: Optional[int] = None) -> None:
        for acc in self.db.list_accounts(owner_id):
            if acc.id != exclude_id and acc.name == name:
                raise ValidationError(f"Account with name '{name}' already exists")

    def create_account(
        self,
        owner_id: str,
        name: str,
        account_type: str = "checking",
        initial_balance: Decimal | int | str = Decimal("0"),
        bank_name: Optional[str] = None,
        color: Optional[str] = None,
        is_active: bool = True,
    ) -> int:
        """Create a new account.

        The current balance starts out equal to the initial balance.

        Args:
            owner_id: Owner of the account
            name: Account name, unique per owner
            account_type: One of checking, savings, wallet, credit_card
            initial_balance: Opening balance (may be negative, e.g. for cards)
            bank_name: Optional bank or institution name
            color: Optional display color
            is_active: Whether the account shows up in dashboards

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is invalid or the name is taken
        """
        name = require_text(name, "name")
        require_choice(account_type, ACCOUNT_TYPES, "account_type")
        try:
            initial = quantize_amount(initial_balance)
        except ValueError as e:
            raise ValidationError(f"Invalid initial balance: {e}")

        with self.db.atomic():
            self._check_unique_name(owner_id, name)
            account_id = self.db.create_account(
                owner_id=owner_id,
                name=name,
                account_type=account_type,
                initial_balance=initial,
                bank_name=bank_name,
                color=color,
                is_active=is_active,
            )
        logger.info("account_created", owner_id=owner_id, account_id=account_id, initial_balance=str(initial))
        return account_id

    def get_account(self, owner_id: str, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID, or None if missing or owned by someone else."""
        return self.db.get_account(account_id, owner_id)

    def require_account(self, owner_id: str, account_id: int) -> AccountEntity:
        """Get account by ID.

        Raises:
            NotFoundError: If the account does not exist for this owner
        """
        account = self.db.get_account(account_id, owner_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, owner_id: str, active_only: bool = False) -> list[AccountEntity]:
        """List the owner's accounts ordered by name."""
        return self.db.list_accounts(owner_id, active_only=active_only)

    def update_account(
        self,
        owner_id: str,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        bank_name: Optional[str] = None,
        color: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update descriptive account fields.

        Balances cannot be edited here; they only move through transactions,
        transfers and goal contributions.

        Raises:
            NotFoundError: If the account does not exist for this owner
            ValidationError: If a field is invalid or the new name is taken
        """
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = require_text(name, "name")
        if account_type is not None:
            changes["account_type"] = require_choice(account_type, ACCOUNT_TYPES, "account_type")
        if bank_name is not None:
            changes["bank_name"] = bank_name
        if color is not None:
            changes["color"] = color
        if is_active is not None:
            changes["is_active"] = is_active

        with self.db.atomic():
            self.require_account(owner_id, account_id)
            if "name" in changes:
                self._check_unique_name(owner_id, changes["name"], exclude_id=account_id)
            if changes:
                self.db.update_account(account_id, **changes)

    def delete_account(self, owner_id: str, account_id: int) -> None:
        """Delete an account with its transactions and transfers.

        Transfers touching the account are deleted too, and their effect on the
        other account is reversed. Goal contributions drawn from the account
        stay on their goals without an account link.

        Raises:
            NotFoundError: If the account does not exist for this owner
        """
        with self.db.atomic():
            if self.db.get_account(account_id, owner_id, for_update=True) is None:
                raise NotFoundError(account_not_found(account_id))

            transfers = self.db.list_transfers(owner_id, account_id=account_id)
            for tr in transfers:
                for other_id, effect in balance.transfer_effects(tr).items():
                    if other_id != account_id:
                        self.db.adjust_account_balance(other_id, -effect)
            self.db.delete_account(account_id)
        logger.info("account_deleted", owner_id=owner_id, account_id=account_id, transfers_removed=len(transfers))

    def compute_expected_balance(self, owner_id: str, account_id: int) -> Decimal:
        """Recompute an account's balance from its initial balance and live records."""
        account = self.require_account(owner_id, account_id)
        total = account.initial_balance
        for tx in self.db.list_transactions(owner_id, account_id=account_id):
            total += balance.transaction_effect(tx)
        for tr in self.db.list_transfers(owner_id, account_id=account_id):
            total += balance.transfer_effects(tr)[account_id]
        for contribution in self.db.list_contributions(owner_id, account_id=account_id):
            total -= contribution.amount
        return quantize_amount(total)

    def reconcile_account(self, owner_id: str, account_id: int, fix: bool = False) -> ReconciliationResult:
        """Compare the stored balance with the recomputed one.

        Args:
            owner_id: Owner of the account
            account_id: Account to check
            fix: Overwrite the stored balance when they differ

        Returns:
            ReconciliationResult describing the difference
        """
        with self.db.atomic():
            stored = self.require_account(owner_id, account_id).current_balance
            expected = self.compute_expected_balance(owner_id, account_id)
            difference = stored - expected
            corrected = False
            if difference and fix:
                self.db.set_account_balance(account_id, expected)
                corrected = True

        if difference:
            logger.warning(
                "account_balance_mismatch",
                owner_id=owner_id,
                account_id=account_id,
                stored=str(stored),
                expected=str(expected),
                corrected=corrected,
            )
        return ReconciliationResult(
            account_id=account_id,
            stored_balance=stored,
            expected_balance=expected,
            difference=difference,
            corrected=corrected,
        )

    def get_statement(
        self,
        owner_id: str,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[StatementEntry]:
        """Chronological statement with a running balance.

        Merges the account's transactions, incoming and outgoing transfers and
        goal contributions. The running balance starts from the initial balance
        and includes entries before start_date even though they are not listed.
        """
        account = self.require_account(owner_id, account_id)

        rows: list[tuple[date, str, int, Optional[str], Decimal]] = []
        for tx in self.db.list_transactions(owner_id, account_id=account_id):
            rows.append((tx.date, "transaction", tx.id, tx.description, balance.transaction_effect(tx)))
        for tr in self.db.list_transfers(owner_id, account_id=account_id):
            kind = "transfer_out" if tr.from_account_id == account_id else "transfer_in"
            rows.append((tr.date, kind, tr.id, tr.description, balance.transfer_effects(tr)[account_id]))
        for contribution in self.db.list_contributions(owner_id, account_id=account_id):
            rows.append(
                (contribution.date, "contribution", contribution.id, contribution.description, -contribution.amount)
            )
        rows.sort(key=lambda row: (row[0], _STATEMENT_ORDER[row[1]], row[2]))

        running = account.initial_balance
        entries = []
        for entry_date, kind, reference_id, description, amount in rows:
            running += amount
            if start_date is not None and entry_date < start_date:
                continue
            if end_date is not None and entry_date > end_date:
                continue
            entries.append(
                StatementEntry(
                    date=entry_date,
                    kind=kind,
                    reference_id=reference_id,
                    description=description,
                    amount=amount,
                    balance=running,
                )
            )
        return entries
