"""Tests for GoalService and goal contributions."""

import threading
import time
import pytest
from datetime import date
from decimal import Decimal

from conftest import OWNER, balance_of
from finledger.domain.errors import InsufficientBalanceError, NotFoundError, ValidationError
from finledger.domain.goal import GoalService


class TestGoals:
    """Tests for goal CRUD and progress."""

    def test_create_goal_defaults(self, goal_service):
        goal_id = goal_service.create_goal(OWNER, "Emergency fund", "5000")
        goal = goal_service.require_goal(OWNER, goal_id)

        assert goal.target_amount == Decimal("5000.00")
        assert goal.current_amount == Decimal("0.00")
        assert goal.status == "active"
        assert goal.is_completed is False

    def test_create_requires_positive_target(self, goal_service):
        with pytest.raises(ValidationError):
            goal_service.create_goal(OWNER, "Nothing", "0")

    def test_starting_amount_at_target_stays_active(self, goal_service):
        goal_id = goal_service.create_goal(OWNER, "Prefunded", "100", current_amount="100")
        assert goal_service.require_goal(OWNER, goal_id).status == "active"

    def test_update_never_touches_current_amount(self, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "100")

        goal = goal_service.update_goal(OWNER, goal_id, name="Big trip", target_amount="2000", status="paused")

        assert goal.name == "Big trip"
        assert goal.target_amount == Decimal("2000.00")
        assert goal.current_amount == Decimal("100.00")
        assert goal.status == "paused"

    def test_update_clear_deadline(self, goal_service):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000", deadline=date(2024, 12, 31))
        goal = goal_service.update_goal(OWNER, goal_id, clear_deadline=True)
        assert goal.deadline is None

    def test_list_by_status(self, goal_service):
        active_id = goal_service.create_goal(OWNER, "A", "10")
        goal_service.create_goal(OWNER, "B", "10", status="paused")
        assert [g.id for g in goal_service.list_goals(OWNER, status="active")] == [active_id]
        assert len(goal_service.list_goals(OWNER)) == 2

    def test_progress(self, goal_service, today):
        goal_id = goal_service.create_goal(
            OWNER, "Trip", "300", current_amount="100", deadline=date(2024, 6, 25)
        )
        progress = goal_service.get_progress(OWNER, goal_id, today=today)

        assert progress.percentage == Decimal("33.33")
        assert progress.remaining == Decimal("200.00")
        assert progress.days_left == 10

    def test_progress_is_capped(self, goal_service):
        goal_id = goal_service.create_goal(OWNER, "Over", "100", current_amount="150")
        progress = goal_service.get_progress(OWNER, goal_id)
        assert progress.percentage == Decimal("100")
        assert progress.remaining == Decimal("0.00")
        assert progress.days_left is None

    def test_delete_goal_refunds_accounts(self, account_service, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "300")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "200")
        assert balance_of(account_service, checking.id) == Decimal("500.00")

        goal_service.delete_goal(OWNER, goal_id)

        assert goal_service.get_goal(OWNER, goal_id) is None
        assert goal_service.list_account_contributions(OWNER, checking.id) == []
        assert balance_of(account_service, checking.id) == Decimal("1000.00")


class TestContributions:
    """Tests for adding and removing contributions."""

    def test_contribution_completes_goal(self, account_service, goal_service, checking):
        """900 saved, 150 more on a 1000 target completes the goal."""
        goal_id = goal_service.create_goal(OWNER, "Laptop", "1000", current_amount="900")

        goal_service.add_contribution(OWNER, goal_id, checking.id, "150", date=date(2024, 5, 1))

        goal = goal_service.require_goal(OWNER, goal_id)
        assert goal.current_amount == Decimal("1050.00")
        assert goal.status == "completed"
        assert goal.is_completed is True
        assert balance_of(account_service, checking.id) == Decimal("850.00")

    def test_partial_contribution_keeps_goal_active(self, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Laptop", "1000")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "999.99")
        goal = goal_service.require_goal(OWNER, goal_id)
        assert goal.status == "active"
        assert goal.is_completed is False

    def test_contribution_of_full_balance_allowed(self, account_service, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Laptop", "5000")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "1000.00")
        assert balance_of(account_service, checking.id) == Decimal("0.00")

    def test_insufficient_balance_leaves_everything_unchanged(self, account_service, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Car", "20000", current_amount="10")

        with pytest.raises(InsufficientBalanceError, match="Insufficient balance in account 'Checking'"):
            goal_service.add_contribution(OWNER, goal_id, checking.id, "1000.01")

        assert balance_of(account_service, checking.id) == Decimal("1000.00")
        assert goal_service.require_goal(OWNER, goal_id).current_amount == Decimal("10.00")
        assert goal_service.list_contributions(OWNER, goal_id) == []

    def test_removal_resets_completed_goal(self, account_service, goal_service, checking, savings):
        """Removing any contribution un-completes the goal even if the target is still met."""
        goal_id = goal_service.create_goal(OWNER, "Laptop", "100")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "120")
        second = goal_service.add_contribution(OWNER, goal_id, savings.id, "30")
        assert goal_service.require_goal(OWNER, goal_id).is_completed is True

        goal_service.remove_contribution(OWNER, second)

        goal = goal_service.require_goal(OWNER, goal_id)
        assert goal.current_amount == Decimal("120.00")
        assert goal.status == "active"
        assert goal.is_completed is False
        assert balance_of(account_service, savings.id) == Decimal("500.00")
        assert balance_of(account_service, checking.id) == Decimal("880.00")

    def test_removal_without_account_only_touches_goal(self, account_service, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        contribution_id = goal_service.add_contribution(OWNER, goal_id, checking.id, "100")
        account_service.delete_account(OWNER, checking.id)

        goal_service.remove_contribution(OWNER, contribution_id)

        assert goal_service.require_goal(OWNER, goal_id).current_amount == Decimal("0.00")
        assert goal_service.list_contributions(OWNER, goal_id) == []

    def test_removal_floors_goal_amount_at_zero(self, temp_db, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        contribution_id = goal_service.add_contribution(OWNER, goal_id, checking.id, "100")
        with temp_db.atomic():
            temp_db.update_goal(goal_id, current_amount=Decimal("40.00"))

        goal_service.remove_contribution(OWNER, contribution_id)

        assert goal_service.require_goal(OWNER, goal_id).current_amount == Decimal("0.00")

    def test_contribution_links_transaction(self, goal_service, transaction_service, checking):
        txn_id = transaction_service.create_transaction(OWNER, checking.id, "income", "50", date(2024, 5, 1))
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "50", transaction_id=txn_id)

        transaction_service.delete_transaction(OWNER, txn_id)

        assert goal_service.list_contributions(OWNER, goal_id)[0].transaction_id is None

    def test_missing_goal_or_account(self, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        with pytest.raises(NotFoundError):
            goal_service.add_contribution(OWNER, 999, checking.id, "10")
        with pytest.raises(NotFoundError):
            goal_service.add_contribution(OWNER, goal_id, 999, "10")
        with pytest.raises(NotFoundError):
            goal_service.remove_contribution(OWNER, 999)

    def test_contribution_defaults_to_today(self, goal_service, checking):
        goal_id = goal_service.create_goal(OWNER, "Trip", "1000")
        goal_service.add_contribution(OWNER, goal_id, checking.id, "10")
        assert goal_service.list_contributions(OWNER, goal_id)[0].date == date.today()

    def test_concurrent_contributions_never_overdraw(self, account_service, goal_service):
        """Contributions racing on one account serialize on the balance check."""
        account_id = account_service.create_account(OWNER, "Shared", initial_balance="100.00")
        goal_id = goal_service.create_goal(OWNER, "Pot", "10000")
        outcomes = []
        barrier = threading.Barrier(8)

        def contribute():
            barrier.wait()
            try:
                goal_service.add_contribution(OWNER, goal_id, account_id, "30.00")
                outcomes.append("ok")
            except InsufficientBalanceError:
                outcomes.append("rejected")

        threads = [threading.Thread(target=contribute) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 3
        assert outcomes.count("rejected") == 5
        assert balance_of(account_service, account_id) == Decimal("10.00")
        assert goal_service.require_goal(OWNER, goal_id).current_amount == Decimal("90.00")
        assert len(goal_service.list_contributions(OWNER, goal_id)) == 3


class TestSeparateHandles:
    """Contributions made through two handles on one database file."""

    def test_second_handle_waits_for_first_contribution(self, monkeypatch, temp_db, second_db, account_service):
        account_id = account_service.create_account(OWNER, "Shared", initial_balance="100.00")
        first = GoalService(temp_db)
        second = GoalService(second_db)
        goal_id = first.create_goal(OWNER, "Pot", "1000")

        checked = threading.Event()
        create_contribution = temp_db.create_contribution

        def slow_create_contribution(**kwargs):
            # The balance check has passed; keep the unit of work open for a while.
            checked.set()
            time.sleep(0.5)
            return create_contribution(**kwargs)

        monkeypatch.setattr(temp_db, "create_contribution", slow_create_contribution)
        outcomes = {}

        def contribute(name, service, wait_for=None):
            if wait_for is not None:
                wait_for.wait(timeout=5)
            try:
                service.add_contribution(OWNER, goal_id, account_id, "60.00")
                outcomes[name] = "ok"
            except InsufficientBalanceError:
                outcomes[name] = "rejected"

        threads = [
            threading.Thread(target=contribute, args=("first", first)),
            threading.Thread(target=contribute, args=("second", second, checked)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes == {"first": "ok", "second": "rejected"}
        assert balance_of(account_service, account_id) == Decimal("40.00")
        assert first.require_goal(OWNER, goal_id).current_amount == Decimal("60.00")

    def test_goal_amount_matches_contributions(self, temp_db, second_db, account_service):
        account_id = account_service.create_account(OWNER, "Shared", initial_balance="1000.00")
        services = [GoalService(temp_db), GoalService(second_db)]
        goal_id = services[0].create_goal(OWNER, "Pot", "10000")
        barrier = threading.Barrier(2)

        def contribute(service):
            barrier.wait()
            for _ in range(5):
                service.add_contribution(OWNER, goal_id, account_id, "10.00")

        threads = [threading.Thread(target=contribute, args=(s,)) for s in services]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        contributions = services[0].list_contributions(OWNER, goal_id)
        assert len(contributions) == 10
        assert services[1].require_goal(OWNER, goal_id).current_amount == sum(c.amount for c in contributions)
        assert balance_of(account_service, account_id) == Decimal("900.00")
