"""Tests for TransferService."""

import pytest
from datetime import date
from decimal import Decimal

from conftest import OWNER, balance_of
from finledger.domain.errors import InvalidTransferError, NotFoundError, ValidationError


@pytest.fixture
def account_a(account_service):
    return account_service.create_account(OWNER, "A", initial_balance="500.00")


@pytest.fixture
def account_b(account_service):
    return account_service.create_account(OWNER, "B", initial_balance="100.00")


def test_create_update_delete_returns_to_start(account_service, transfer_service, account_a, account_b):
    """Create, edit and delete a transfer; balances end where they started."""
    transfer_id = transfer_service.create_transfer(OWNER, account_a, account_b, "200.00", date(2024, 3, 1))
    assert balance_of(account_service, account_a) == Decimal("300.00")
    assert balance_of(account_service, account_b) == Decimal("300.00")

    transfer_service.update_transfer(OWNER, transfer_id, amount="50.00")
    assert balance_of(account_service, account_a) == Decimal("450.00")
    assert balance_of(account_service, account_b) == Decimal("150.00")

    transfer_service.delete_transfer(OWNER, transfer_id)
    assert balance_of(account_service, account_a) == Decimal("500.00")
    assert balance_of(account_service, account_b) == Decimal("100.00")


def test_transfers_conserve_total_money(account_service, transfer_service, account_a, account_b, savings):
    transfer_service.create_transfer(OWNER, account_a, account_b, "12.34", date(2024, 3, 1))
    tr = transfer_service.create_transfer(OWNER, account_b, savings.id, "99.99", date(2024, 3, 2))
    transfer_service.update_transfer(OWNER, tr, from_account_id=account_a)

    total = sum(a.current_balance for a in account_service.list_accounts(OWNER))
    assert total == Decimal("1100.00")


def test_same_account_rejected_without_mutation(account_service, transfer_service, account_a):
    with pytest.raises(InvalidTransferError):
        transfer_service.create_transfer(OWNER, account_a, account_a, "10.00", date(2024, 3, 1))
    assert balance_of(account_service, account_a) == Decimal("500.00")
    assert transfer_service.list_transfers(OWNER) == []


def test_update_to_same_account_rejected(account_service, transfer_service, account_a, account_b):
    transfer_id = transfer_service.create_transfer(OWNER, account_a, account_b, "10.00", date(2024, 3, 1))
    with pytest.raises(InvalidTransferError):
        transfer_service.update_transfer(OWNER, transfer_id, to_account_id=account_a)

    transfer = transfer_service.require_transfer(OWNER, transfer_id)
    assert transfer.to_account_id == account_b
    assert balance_of(account_service, account_a) == Decimal("490.00")
    assert balance_of(account_service, account_b) == Decimal("110.00")


def test_non_positive_amount_rejected(transfer_service, account_a, account_b):
    with pytest.raises(ValidationError):
        transfer_service.create_transfer(OWNER, account_a, account_b, "0", date(2024, 3, 1))


def test_missing_account_rejected(account_service, transfer_service, account_a):
    with pytest.raises(NotFoundError):
        transfer_service.create_transfer(OWNER, account_a, 999, "10.00", date(2024, 3, 1))
    assert balance_of(account_service, account_a) == Decimal("500.00")


def test_update_moves_destination(account_service, transfer_service, account_a, account_b, savings):
    transfer_id = transfer_service.create_transfer(OWNER, account_a, account_b, "100.00", date(2024, 3, 1))

    updated = transfer_service.update_transfer(OWNER, transfer_id, to_account_id=savings.id)

    assert updated.to_account_id == savings.id
    assert balance_of(account_service, account_a) == Decimal("400.00")
    assert balance_of(account_service, account_b) == Decimal("100.00")
    assert balance_of(account_service, savings.id) == Decimal("600.00")


def test_transfer_may_overdraw(account_service, transfer_service, account_a, account_b):
    """Transfers do not check the source balance."""
    transfer_service.create_transfer(OWNER, account_b, account_a, "150.00", date(2024, 3, 1))
    assert balance_of(account_service, account_b) == Decimal("-50.00")


def test_list_by_account_matches_either_side(transfer_service, account_a, account_b, savings):
    t1 = transfer_service.create_transfer(OWNER, account_a, account_b, "1.00", date(2024, 3, 1))
    t2 = transfer_service.create_transfer(OWNER, savings.id, account_a, "2.00", date(2024, 3, 2))
    t3 = transfer_service.create_transfer(OWNER, account_b, savings.id, "3.00", date(2024, 3, 3))

    assert [t.id for t in transfer_service.list_transfers(OWNER)] == [t3, t2, t1]
    assert [t.id for t in transfer_service.list_transfers(OWNER, account_id=account_a)] == [t2, t1]
    assert [t.id for t in transfer_service.list_transfers(OWNER, start_date=date(2024, 3, 2))] == [t3, t2]
