"""Shared pytest fixtures for finledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from finledger.database.factories import create_sqlite_database
from finledger.domain.account import AccountService
from finledger.domain.category import CategoryService
from finledger.domain.goal import GoalService
from finledger.domain.summary import SummaryService
from finledger.domain.transaction import TransactionService
from finledger.domain.transfer import TransferService

OWNER = "alice"
OTHER_OWNER = "bob"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def second_db(temp_db):
    """Open another handle on the temporary database file, as a second process would."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    yield db
    db.disconnect()


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def transfer_service(temp_db):
    """Create a TransferService with a temporary database."""
    return TransferService(temp_db)


@pytest.fixture
def goal_service(temp_db):
    """Create a GoalService with a temporary database."""
    return GoalService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def checking(account_service):
    """Checking account opened with 1000.00."""
    account_id = account_service.create_account(
        OWNER, name="Checking", initial_balance=Decimal("1000.00"), bank_name="Test Bank"
    )
    return account_service.get_account(OWNER, account_id)


@pytest.fixture
def savings(account_service):
    """Savings account opened with 500.00."""
    account_id = account_service.create_account(
        OWNER, name="Savings", account_type="savings", initial_balance=Decimal("500.00")
    )
    return account_service.get_account(OWNER, account_id)


@pytest.fixture
def sample_categories(category_service):
    """A few income and expense categories keyed by name."""
    return {
        "Salary": category_service.create_category(OWNER, "Salary", "income"),
        "Groceries": category_service.create_category(OWNER, "Groceries", "expense"),
        "Rent": category_service.create_category(OWNER, "Rent", "expense"),
    }


@pytest.fixture
def today():
    """Fixed reference date for date-dependent tests."""
    return date(2024, 6, 15)


def balance_of(account_service, account_id, owner_id=OWNER):
    """Current balance of an account."""
    return account_service.require_account(owner_id, account_id).current_balance


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def run_cli(cli_runner, temp_db):
    """Invoke the CLI against the temporary database as OWNER."""
    from finledger.cli.main import cli

    def invoke(*args, input=None):
        return cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "--user", OWNER, *args], input=input
        )

    return invoke
