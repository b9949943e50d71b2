"""Dashboard summaries derived from accounts and transactions.

Nothing here writes: every figure is recomputed from the stored records.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from finledger.database.base import Database
from finledger.domain.entities import (
    EXPENSE,
    INCOME,
    TRANSACTION_TYPES,
    CategoryTotal,
    MonthlyTotals,
    Overview,
    Transaction,
)
from finledger.domain.validation import require_choice
from finledger.utils.date_parser import month_bounds

ZERO = Decimal("0.00")
UNCATEGORIZED = "Uncategorized"


def _totals(transactions: list[Transaction]) -> tuple[Decimal, Decimal]:
    income = sum((t.amount for t in transactions if t.transaction_type == INCOME), ZERO)
    expense = sum((t.amount for t in transactions if t.transaction_type == EXPENSE), ZERO)
    return income, expense


class SummaryService:
    """Service for dashboard totals, monthly series and category breakdowns."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_overview(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> Overview:
        """Total balance of active accounts plus income and expense for a period.

        The account and category filters narrow the income and expense totals
        only; the total balance always covers every active account.
        """
        total_balance = sum(
            (acc.current_balance for acc in self.db.list_accounts(owner_id, active_only=True)), ZERO
        )
        transactions = self.db.list_transactions(
            owner_id,
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            category_id=category_id,
        )
        income, expense = _totals(transactions)
        return Overview(
            total_balance=total_balance,
            total_income=income,
            total_expense=expense,
            net=income - expense,
            transaction_count=len(transactions),
        )

    def get_monthly_totals(
        self,
        owner_id: str,
        months: int = 6,
        today: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[MonthlyTotals]:
        """Income, expense and net per calendar month, oldest month first.

        The series ends with the month containing today.
        """
        today = today or date.today()
        first_month = today.replace(day=1) - relativedelta(months=months - 1)
        transactions = self.db.list_transactions(
            owner_id,
            start_date=first_month,
            end_date=month_bounds(today.year, today.month)[1],
            account_id=account_id,
        )

        by_month: dict[tuple[int, int], list[Transaction]] = defaultdict(list)
        for txn in transactions:
            by_month[(txn.date.year, txn.date.month)].append(txn)

        series = []
        for offset in range(months):
            month_start = first_month + relativedelta(months=offset)
            income, expense = _totals(by_month[(month_start.year, month_start.month)])
            series.append(
                MonthlyTotals(
                    year=month_start.year,
                    month=month_start.month,
                    income=income,
                    expense=expense,
                    net=income - expense,
                )
            )
        return series

    def get_category_breakdown(
        self,
        owner_id: str,
        transaction_type: str = EXPENSE,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CategoryTotal]:
        """Totals per category for income or expense, largest first."""
        require_choice(transaction_type, TRANSACTION_TYPES, "transaction_type")
        transactions = self.db.list_transactions(
            owner_id, start_date=start_date, end_date=end_date, transaction_type=transaction_type
        )
        names = {cat.id: cat.name for cat in self.db.list_categories(owner_id)}

        totals: dict[Optional[int], Decimal] = defaultdict(lambda: ZERO)
        counts: dict[Optional[int], int] = defaultdict(int)
        for txn in transactions:
            totals[txn.category_id] += txn.amount
            counts[txn.category_id] += 1

        breakdown = [
            CategoryTotal(
                category_id=category_id,
                category_name=names.get(category_id, UNCATEGORIZED) if category_id is not None else UNCATEGORIZED,
                total=total,
                count=counts[category_id],
            )
            for category_id, total in totals.items()
        ]
        breakdown.sort(key=lambda item: (-item.total, item.category_name))
        return breakdown
