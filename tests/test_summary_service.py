"""Tests for SummaryService."""

import pytest
from datetime import date
from decimal import Decimal

from conftest import OWNER
from finledger.domain.errors import ValidationError


@pytest.fixture
def history(transaction_service, checking, savings, sample_categories):
    """A few months of income and expenses."""
    add = transaction_service.create_transaction
    add(OWNER, checking.id, "income", "3000.00", date(2024, 4, 5), category_id=sample_categories["Salary"])
    add(OWNER, checking.id, "expense", "1200.00", date(2024, 4, 10), category_id=sample_categories["Rent"])
    add(OWNER, checking.id, "income", "3000.00", date(2024, 5, 5), category_id=sample_categories["Salary"])
    add(OWNER, checking.id, "expense", "1200.00", date(2024, 5, 10), category_id=sample_categories["Rent"])
    add(OWNER, savings.id, "expense", "80.50", date(2024, 6, 1), category_id=sample_categories["Groceries"])
    add(OWNER, savings.id, "expense", "19.50", date(2024, 6, 2))
    return sample_categories


def test_overview_totals(summary_service, history):
    overview = summary_service.get_overview(OWNER)

    assert overview.total_balance == Decimal("5000.00")
    assert overview.total_income == Decimal("6000.00")
    assert overview.total_expense == Decimal("2500.00")
    assert overview.net == Decimal("3500.00")
    assert overview.transaction_count == 6


def test_overview_for_period(summary_service, history):
    overview = summary_service.get_overview(OWNER, start_date=date(2024, 5, 1), end_date=date(2024, 5, 31))
    assert overview.total_income == Decimal("3000.00")
    assert overview.total_expense == Decimal("1200.00")
    assert overview.transaction_count == 2
    # Total balance is not limited by the period
    assert overview.total_balance == Decimal("5000.00")


def test_overview_ignores_inactive_accounts_in_balance(account_service, summary_service, history, savings):
    account_service.update_account(OWNER, savings.id, is_active=False)
    assert summary_service.get_overview(OWNER).total_balance == Decimal("4600.00")


def test_monthly_totals(summary_service, history, today):
    series = summary_service.get_monthly_totals(OWNER, months=4, today=today)

    assert [(m.year, m.month) for m in series] == [(2024, 3), (2024, 4), (2024, 5), (2024, 6)]
    assert series[0].income == Decimal("0.00")
    assert series[1].net == Decimal("1800.00")
    assert series[3].expense == Decimal("100.00")


def test_monthly_totals_cross_year(summary_service):
    series = summary_service.get_monthly_totals(OWNER, months=3, today=date(2024, 1, 20))
    assert [(m.year, m.month) for m in series] == [(2023, 11), (2023, 12), (2024, 1)]


def test_category_breakdown(summary_service, history):
    breakdown = summary_service.get_category_breakdown(OWNER)

    assert [(c.category_name, c.total, c.count) for c in breakdown] == [
        ("Rent", Decimal("2400.00"), 2),
        ("Groceries", Decimal("80.50"), 1),
        ("Uncategorized", Decimal("19.50"), 1),
    ]


def test_income_breakdown(summary_service, history):
    breakdown = summary_service.get_category_breakdown(OWNER, transaction_type="income")
    assert [(c.category_name, c.total) for c in breakdown] == [("Salary", Decimal("6000.00"))]


def test_breakdown_rejects_unknown_type(summary_service):
    with pytest.raises(ValidationError):
        summary_service.get_category_breakdown(OWNER, transaction_type="transfer")
