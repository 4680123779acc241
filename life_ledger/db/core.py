from typing import Optional, List
from sqlalchemy import create_engine, ForeignKey, Index, UniqueConstraint, Boolean, String, Text, JSON, Float, Integer, DateTime, Date
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Mapped, relationship, mapped_column
from datetime import datetime, date

from life_ledger.config import get_settings


class NotFoundError(Exception):
    pass


class ConflictError(Exception):
    """A uniqueness rule was violated (duplicate name, duplicate natural key)."""
    pass


class StorageError(Exception):
    """The backing store could not be read or written."""
    pass


class UnauthorizedError(Exception):
    pass


class Base(DeclarativeBase):
    pass


# ===== PER-USER TABLES =====

class CategoryDB(Base):
    __tablename__ = "categories"

    __table_args__ = (
        Index("idx_categories_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # income | expense
    icon: Mapped[Optional[str]] = mapped_column(String(32))
    color: Mapped[Optional[str]] = mapped_column(String(32))
    budgeting_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class TaskCategoryDB(Base):
    __tablename__ = "task_categories"

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_user_task_category_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(32))
    icon: Mapped[Optional[str]] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class HabitDB(Base):
    __tablename__ = "habits"

    __table_args__ = (
        Index("idx_habits_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    icon: Mapped[Optional[str]] = mapped_column(String(32))
    start_date: Mapped[date] = mapped_column(Date, default=date.today)
    active_from_date: Mapped[Optional[date]] = mapped_column(Date)
    # Soft-delete marker; archived habits keep their logs
    archived_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    frequency: Mapped[str] = mapped_column(String(32), default="daily")
    goal_target: Mapped[float] = mapped_column(Float, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    logs: Mapped[List["HabitLogDB"]] = relationship(back_populates="habit")


class HabitLogDB(Base):
    __tablename__ = "habit_logs"

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_log_habit_date"),
        Index("idx_habit_logs_user_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    habit_id: Mapped[int] = mapped_column(ForeignKey("habits.id"), nullable=False)
    date = mapped_column(Date, nullable=False)
    completed_value: Mapped[float] = mapped_column(Float, default=0)

    habit: Mapped[HabitDB] = relationship(back_populates="logs")


# ===== FILE-BACKED BY DEFAULT =====
# These tables exist so the resources can be routed to the relational backend;
# user_id stays nullable because the file backend does not always scope by user.

class TransactionDB(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    date = mapped_column(Date, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # income | expense
    icon: Mapped[Optional[str]] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class BudgetDB(Base):
    __tablename__ = "budgets"

    __table_args__ = (
        # One budget per category
        UniqueConstraint("user_id", "category", name="uq_user_budget_category"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64))
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    limit: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    color: Mapped[Optional[str]] = mapped_column(String(32))


class CardDB(Base):
    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64))
    bank_name: Mapped[str] = mapped_column(String(255), nullable=False)
    holder: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[float] = mapped_column(Float, default=0)
    limit: Mapped[Optional[float]] = mapped_column(Float)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # debit | credit
    number: Mapped[str] = mapped_column(String(4), nullable=False)
    expiry: Mapped[Optional[str]] = mapped_column(String(7))
    pin: Mapped[Optional[str]] = mapped_column(String(8))
    color: Mapped[Optional[str]] = mapped_column(String(64))
    is_frozen: Mapped[bool] = mapped_column(Boolean, default=False)


class InstallmentDB(Base):
    __tablename__ = "installments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    provider: Mapped[str] = mapped_column(String(255), nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    paid_amount: Mapped[float] = mapped_column(Float, default=0)
    total_months: Mapped[int] = mapped_column(Integer, nullable=False)
    paid_months: Mapped[int] = mapped_column(Integer, default=0)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)


class TaskDB(Base):
    __tablename__ = "tasks"

    __table_args__ = (
        Index("idx_tasks_user_due", "user_id", "due_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64))
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100))
    priority: Mapped[str] = mapped_column(String(16), default="medium")
    due_date: Mapped[Optional[date]] = mapped_column(Date)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(16), default="todo")
    # Ordered list of {id, title, completed}
    subtasks: Mapped[list] = mapped_column(JSON, default=list)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


RESOURCE_TABLES = {
    "categories": CategoryDB,
    "task_categories": TaskCategoryDB,
    "habits": HabitDB,
    "habit_logs": HabitLogDB,
    "transactions": TransactionDB,
    "budgets": BudgetDB,
    "cards": CardDB,
    "installments": InstallmentDB,
    "tasks": TaskDB,
}


settings = get_settings()
engine = create_engine(settings.database_url, echo=settings.sql_echo)
session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create any missing tables on the given engine (defaults to the app engine)."""
    Base.metadata.create_all(bind=bind or engine)


# Dependency to get the database session
def get_db():
    database = session_local()
    try:
        yield database
    finally:
        database.close()
