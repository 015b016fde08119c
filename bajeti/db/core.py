import os
from typing import Optional
from sqlalchemy import create_engine, ForeignKey, Index, UniqueConstraint, Boolean, String, Text, DECIMAL, DateTime, Date
from sqlalchemy.types import Enum
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Mapped, relationship, mapped_column
from datetime import datetime, date
from decimal import Decimal
import enum



DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///bajeti.db")


class Base(DeclarativeBase):
    pass


class TransactionKind(enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class AccountType(enum.Enum):
    BANK = "bank"
    MOBILE = "mobile"
    LOAN = "loan"
    CASH = "cash"


class AllocationType(enum.Enum):
    NEEDS = "needs"
    WANTS = "wants"
    SAVINGS = "savings"


class UserDB(Base):
    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
        Index("idx_users_email", "email"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Authentication
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Profile
    full_name: Mapped[Optional[str]] = mapped_column(String(255))

    # Preferences
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    language: Mapped[str] = mapped_column(String(50), default="English")
    theme: Mapped[str] = mapped_column(String(20), default="system")
    notify_email: Mapped[bool] = mapped_column(Boolean, default=True)
    notify_push: Mapped[bool] = mapped_column(Boolean, default=False)
    notify_sms: Mapped[bool] = mapped_column(Boolean, default=False)

    # Audit Trail
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    accounts = relationship("FinancialAccountDB", back_populates="user")
    transactions = relationship("TransactionDB", back_populates="user")
    budgets = relationship("BudgetDB", back_populates="user")
    categories = relationship("CategoryDB", back_populates="user")


class CategoryDB(Base):
    __tablename__ = "categories"

    __table_args__ = (
        # System categories have a null owner
        UniqueConstraint("user_id", "name", name="uq_user_category_name"),
        Index("idx_category_name", "name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user = relationship("UserDB", back_populates="categories")
    budget_allocations = relationship("BudgetCategoryDB", back_populates="category")
    transactions = relationship("TransactionDB", back_populates="category")


class BudgetDB(Base):
    __tablename__ = "budgets"

    __table_args__ = (
        # One budget per user per calendar month
        UniqueConstraint("user_id", "month", "year", name="uq_user_budget_period"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    month: Mapped[int] = mapped_column(nullable=False)
    year: Mapped[int] = mapped_column(nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user = relationship("UserDB", back_populates="budgets")
    budget_categories = relationship("BudgetCategoryDB", back_populates="budget")
    allocation = relationship("BudgetAllocationDB", back_populates="budget", uselist=False)


class BudgetCategoryDB(Base):
    __tablename__ = "budget_categories"

    __table_args__ = (
        UniqueConstraint("budget_id", "category_id", name="uq_budget_category"),
        Index("idx_budget_categories_budget", "budget_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    budget_id: Mapped[Optional[int]] = mapped_column(ForeignKey("budgets.id"))
    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"))

    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), nullable=False)
    allocation_type: Mapped[Optional[AllocationType]] = mapped_column(Enum(AllocationType))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    budget = relationship("BudgetDB", back_populates="budget_categories")
    category = relationship("CategoryDB", back_populates="budget_allocations")


class BudgetAllocationDB(Base):
    __tablename__ = "budget_allocations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    budget_id: Mapped[int] = mapped_column(ForeignKey("budgets.id"), unique=True, nullable=False)

    income_amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), nullable=False)
    needs_percentage: Mapped[Decimal] = mapped_column(DECIMAL(5, 2), nullable=False)
    wants_percentage: Mapped[Decimal] = mapped_column(DECIMAL(5, 2), nullable=False)
    savings_percentage: Mapped[Decimal] = mapped_column(DECIMAL(5, 2), nullable=False)
    needs_amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), nullable=False)
    wants_amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), nullable=False)
    savings_amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    budget = relationship("BudgetDB", back_populates="allocation")


class TransactionDB(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "transaction_date"),
        Index("idx_transactions_user_category", "user_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"))
    account_id: Mapped[Optional[int]] = mapped_column(ForeignKey("financial_accounts.id"))

    # Amount is always a positive magnitude; kind decides the cash-flow direction
    kind: Mapped[TransactionKind] = mapped_column(Enum(TransactionKind), nullable=False)
    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)

    description: Mapped[Optional[str]] = mapped_column(String(500))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    frequency: Mapped[Optional[str]] = mapped_column(String(20))  # income cadence, e.g. "monthly"

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user = relationship("UserDB", back_populates="transactions")
    category = relationship("CategoryDB", back_populates="transactions")
    account = relationship("FinancialAccountDB", back_populates="transactions")


class FinancialAccountDB(Base):
    __tablename__ = "financial_accounts"

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_user_account_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)  # "Main Savings", "M-Pesa"
    account_type: Mapped[AccountType] = mapped_column(Enum(AccountType), nullable=False)
    institution: Mapped[Optional[str]] = mapped_column(String(255))
    account_mask: Mapped[Optional[str]] = mapped_column(String(4))

    # Snapshot balance, maintained independently of transactions
    balance: Mapped[Decimal] = mapped_column(DECIMAL(15, 3), default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    credit_limit: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(15, 3))  # loans only
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserDB", back_populates="accounts")
    transactions = relationship("TransactionDB", back_populates="account")


engine = create_engine(DATABASE_URL, echo=os.getenv("SQL_ECHO", "false").lower() == "true")
session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(bind=bind or engine)


# Dependency to get the database session
def get_db():
    database = session_local()
    try:
        yield database
    finally:
        database.close()
