"""SQLAlchemy models for finledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    CheckConstraint,
    Index,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(15, 2)


def _now() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Ledger account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    bank_name = Column(String, nullable=True)
    initial_balance = Column(MONEY, default=0, nullable=False)
    current_balance = Column(MONEY, default=0, nullable=False)
    color = Column(String, default="#10b981", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete-orphan")


class Category(Base):
    """Category model with optional parent."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    category_type = Column(String, nullable=False)
    color = Column(String, default="#6366f1", nullable=False)
    icon = Column(String, default="tag", nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Transaction(Base):
    """Income or expense transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    transaction_type = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    recurrence = Column(String, default="none", nullable=False)
    notes = Column(String, nullable=True)
    currency = Column(String, default="BRL", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),)

    # Relationships
    account = relationship("Account", back_populates="transactions")


class Transfer(Base):
    """Transfer between two accounts."""

    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    from_account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    to_account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    currency = Column(String, default="BRL", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfer_amount_positive"),
        CheckConstraint("from_account_id <> to_account_id", name="ck_transfer_distinct_accounts"),
    )


class Goal(Base):
    """Savings goal model."""

    __tablename__ = "financial_goals"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    target_amount = Column(MONEY, nullable=False)
    current_amount = Column(MONEY, default=0, nullable=False)
    deadline = Column(Date, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    status = Column(String, default="active", nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('active', 'completed', 'paused')", name="ck_goal_status"),
    )

    # Relationships
    contributions = relationship("GoalContribution", back_populates="goal", cascade="all, delete-orphan")


class GoalContribution(Base):
    """Contribution from an account into a goal."""

    __tablename__ = "goal_contributions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    goal_id = Column(Integer, ForeignKey("financial_goals.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        Index("idx_goal_contributions_goal_id", "goal_id"),
        Index("idx_goal_contributions_account_id", "account_id"),
    )

    # Relationships
    goal = relationship("Goal", back_populates="contributions")


# Execution option set by Database.atomic() on the connection of a unit of work.
BEGIN_IMMEDIATE = "finledger_begin_immediate"


def _install_sqlite_locking(engine) -> None:
    """Let units of work take SQLite's write lock up front.

    pysqlite's own transaction handling is turned off, so plain reads run in
    autocommit and hold no lock. A connection opened with the BEGIN_IMMEDIATE
    execution option starts with BEGIN IMMEDIATE instead, which makes any
    other writer on the same file wait until it commits or rolls back.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get(BEGIN_IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are thread-local; pooled connections may move between threads.
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        _install_sqlite_locking(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
