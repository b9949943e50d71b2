"""Tests for TransactionService."""

import pytest
from datetime import date
from decimal import Decimal

from conftest import OWNER, balance_of
from finledger.domain.errors import NotFoundError, ValidationError


def test_create_expense_debits_account(account_service, transaction_service, checking):
    """An expense lowers the balance by its amount."""
    txn_id = transaction_service.create_transaction(
        OWNER, checking.id, "expense", "150.00", date(2024, 1, 15), description="Groceries"
    )

    txn = transaction_service.require_transaction(OWNER, txn_id)
    assert txn.amount == Decimal("150.00")
    assert txn.recurrence == "none"
    assert txn.currency == "BRL"
    assert balance_of(account_service, checking.id) == Decimal("850.00")


def test_create_income_credits_account(account_service, transaction_service, checking):
    transaction_service.create_transaction(OWNER, checking.id, "income", "2500", date(2024, 1, 5))
    assert balance_of(account_service, checking.id) == Decimal("3500.00")


def test_amount_is_rounded_half_up(account_service, transaction_service, checking):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "0.005", date(2024, 1, 5))
    assert transaction_service.require_transaction(OWNER, txn_id).amount == Decimal("0.01")
    assert balance_of(account_service, checking.id) == Decimal("999.99")


@pytest.mark.parametrize("amount", ["0", "-10.00", "0.004", "abc"])
def test_non_positive_amount_rejected(account_service, transaction_service, checking, amount):
    """Invalid amounts fail before anything is written."""
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(OWNER, checking.id, "expense", amount, date(2024, 1, 5))
    assert transaction_service.list_transactions(OWNER) == []
    assert balance_of(account_service, checking.id) == Decimal("1000.00")


def test_invalid_type_rejected(transaction_service, checking):
    with pytest.raises(ValidationError, match="transaction type"):
        transaction_service.create_transaction(OWNER, checking.id, "refund", "10.00", date(2024, 1, 5))


def test_missing_date_rejected(transaction_service, checking):
    with pytest.raises(ValidationError, match="Date is required"):
        transaction_service.create_transaction(OWNER, checking.id, "expense", "10.00", None)


def test_missing_account_rejected(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(OWNER, 999, "expense", "10.00", date(2024, 1, 5))


def test_category_type_must_match(transaction_service, checking, sample_categories):
    with pytest.raises(ValidationError, match="cannot be used"):
        transaction_service.create_transaction(
            OWNER, checking.id, "income", "10.00", date(2024, 1, 5), category_id=sample_categories["Rent"]
        )


def test_update_amount_reverses_then_applies(account_service, transaction_service, checking):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "100.00", date(2024, 1, 5))

    updated = transaction_service.update_transaction(OWNER, txn_id, amount="250.00")

    assert updated.amount == Decimal("250.00")
    assert balance_of(account_service, checking.id) == Decimal("750.00")


def test_update_type_flips_effect(account_service, transaction_service, checking):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "100.00", date(2024, 1, 5))
    transaction_service.update_transaction(OWNER, txn_id, transaction_type="income")
    assert balance_of(account_service, checking.id) == Decimal("1100.00")


def test_update_moves_effect_to_new_account(account_service, transaction_service, checking, savings):
    """Changing the account undoes the effect on the old one and applies it to the new one."""
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "100.00", date(2024, 1, 5))

    transaction_service.update_transaction(OWNER, txn_id, account_id=savings.id, amount="40.00")

    assert balance_of(account_service, checking.id) == Decimal("1000.00")
    assert balance_of(account_service, savings.id) == Decimal("460.00")


def test_update_without_changes_keeps_balance(account_service, transaction_service, checking):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "100.00", date(2024, 1, 5))
    transaction_service.update_transaction(OWNER, txn_id, description="Same money")
    assert balance_of(account_service, checking.id) == Decimal("900.00")


def test_update_clear_category(transaction_service, checking, sample_categories):
    txn_id = transaction_service.create_transaction(
        OWNER, checking.id, "expense", "10.00", date(2024, 1, 5), category_id=sample_categories["Groceries"]
    )
    updated = transaction_service.update_transaction(OWNER, txn_id, clear_category=True)
    assert updated.category_id is None


def test_update_category_and_clear_conflict(transaction_service, checking, sample_categories):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "10.00", date(2024, 1, 5))
    with pytest.raises(ValidationError):
        transaction_service.update_transaction(
            OWNER, txn_id, category_id=sample_categories["Groceries"], clear_category=True
        )


def test_update_type_with_mismatched_category_rejected(
    account_service, transaction_service, checking, sample_categories
):
    txn_id = transaction_service.create_transaction(
        OWNER, checking.id, "expense", "10.00", date(2024, 1, 5), category_id=sample_categories["Groceries"]
    )
    with pytest.raises(ValidationError):
        transaction_service.update_transaction(OWNER, txn_id, transaction_type="income")
    assert balance_of(account_service, checking.id) == Decimal("990.00")


def test_update_to_missing_account_leaves_state_unchanged(account_service, transaction_service, checking):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "expense", "10.00", date(2024, 1, 5))
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(OWNER, txn_id, account_id=999)
    assert transaction_service.require_transaction(OWNER, txn_id).account_id == checking.id
    assert balance_of(account_service, checking.id) == Decimal("990.00")


def test_delete_reverses_effect(account_service, transaction_service, checking):
    txn_id = transaction_service.create_transaction(OWNER, checking.id, "income", "75.00", date(2024, 1, 5))
    transaction_service.delete_transaction(OWNER, txn_id)

    assert transaction_service.get_transaction(OWNER, txn_id) is None
    assert balance_of(account_service, checking.id) == Decimal("1000.00")


def test_delete_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(OWNER, 404)


def test_list_filters_and_order(transaction_service, checking, savings, sample_categories):
    t1 = transaction_service.create_transaction(OWNER, checking.id, "expense", "10.00", date(2024, 1, 5))
    t2 = transaction_service.create_transaction(
        OWNER, checking.id, "income", "20.00", date(2024, 2, 5), category_id=sample_categories["Salary"]
    )
    t3 = transaction_service.create_transaction(OWNER, savings.id, "expense", "30.00", date(2024, 2, 5))

    assert [t.id for t in transaction_service.list_transactions(OWNER)] == [t3, t2, t1]
    assert [t.id for t in transaction_service.list_transactions(OWNER, account_id=checking.id)] == [t2, t1]
    assert [t.id for t in transaction_service.list_transactions(OWNER, transaction_type="expense")] == [t3, t1]
    assert [
        t.id for t in transaction_service.list_transactions(OWNER, category_id=sample_categories["Salary"])
    ] == [t2]
    assert [
        t.id
        for t in transaction_service.list_transactions(
            OWNER, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
        )
    ] == [t1]


def test_deleting_category_uncategorizes_transactions(category_service, transaction_service, checking, sample_categories):
    txn_id = transaction_service.create_transaction(
        OWNER, checking.id, "expense", "10.00", date(2024, 1, 5), category_id=sample_categories["Groceries"]
    )
    category_service.delete_category(OWNER, sample_categories["Groceries"])
    assert transaction_service.require_transaction(OWNER, txn_id).category_id is None
