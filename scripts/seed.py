import sys
import os
import random
from sqlalchemy.orm import Session
from datetime import date, timedelta
from decimal import Decimal
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bajeti.db.core import session_local, init_db, UserDB, CategoryDB, AccountType, TransactionKind
from bajeti.crud import crud_user, crud_account, crud_budget, crud_transaction
from bajeti.models.user import UserCreate
from bajeti.models.account import AccountCreate
from bajeti.models.budget import BudgetCreate, AllocationSplit
from bajeti.models.transaction import TransactionCreate

fake = Faker()

SYSTEM_CATEGORIES = [
    "Rent", "Utilities", "Groceries", "Transport", "Restaurants",
    "Entertainment", "Shopping", "Health", "Education", "Savings", "Salary",
]

CURRENCIES = ["TZS", "KES", "IDR"]

NEEDS_CATEGORIES = {"Rent", "Utilities", "Groceries", "Transport", "Health", "Education"}


def seed_database(users: int = 3, months: int = 3):
    """
    Fills the database with sample users, wallets, budgets and transactions.
    """
    init_db()
    db: Session = session_local()

    try:
        if db.query(UserDB).count() > 0:
            print("Database appears to be already seeded. Exiting.")
            return

        print("Creating system categories...")
        categories = []
        for name in SYSTEM_CATEGORIES:
            category = CategoryDB(name=name, is_system=True)
            db.add(category)
            categories.append(category)
        db.commit()
        salary = next(c for c in categories if c.name == "Salary")
        spending_categories = [c for c in categories if c.name not in ("Salary", "Savings")]

        today = date.today()
        for i in range(users):
            print(f"--- Seeding user {i + 1}/{users} ---")
            currency = random.choice(CURRENCIES)
            user = crud_user.create_db_user(db, UserCreate(
                email=fake.unique.email(),
                password="password123",
                confirm_password="password123",
                full_name=fake.name(),
                currency=currency,
            ))

            main_wallet = crud_account.create_db_account(db, user.id, AccountCreate(
                name="Main Account",
                account_type=AccountType.BANK,
                currency=currency,
                balance=Decimal(random.randint(200_000, 5_000_000)),
                institution=fake.company(),
                account_mask=str(random.randint(1000, 9999)),
            ))
            crud_account.create_db_account(db, user.id, AccountCreate(
                name="Mobile Money",
                account_type=AccountType.MOBILE,
                currency=currency,
                balance=Decimal(random.randint(10_000, 500_000)),
            ))
            crud_account.create_db_account(db, user.id, AccountCreate(
                name="Salary Advance",
                account_type=AccountType.LOAN,
                currency=currency,
                balance=Decimal(random.randint(0, 300_000)),
                credit_limit=Decimal(500_000),
            ))

            month_start = today.replace(day=1)
            for _ in range(months):
                income = Decimal(random.randint(800_000, 3_000_000))
                budgeted = random.sample(spending_categories, 4)
                crud_budget.create_db_budget(db, user.id, BudgetCreate(
                    month=month_start.month,
                    year=month_start.year,
                    currency=currency,
                    income_amount=income,
                    split=AllocationSplit(needs=Decimal(50), wants=Decimal(30), savings=Decimal(20)),
                    categories=[
                        {
                            "category_id": c.id,
                            "amount": Decimal(random.randint(50_000, 300_000)),
                            "allocation_type": "needs" if c.name in NEEDS_CATEGORIES else "wants",
                        }
                        for c in budgeted
                    ],
                ))

                crud_transaction.create_db_transaction(db, user.id, TransactionCreate(
                    kind=TransactionKind.INCOME,
                    amount=income,
                    transaction_date=month_start,
                    category_id=salary.id,
                    account_id=main_wallet.id,
                    description="Salary",
                    frequency="monthly",
                ))
                for _ in range(random.randint(10, 25)):
                    category = random.choice(spending_categories + [None])
                    crud_transaction.create_db_transaction(db, user.id, TransactionCreate(
                        kind=TransactionKind.EXPENSE,
                        amount=Decimal(random.randint(1_000, 120_000)),
                        transaction_date=month_start + timedelta(days=random.randint(0, 27)),
                        category_id=category.id if category else None,
                        account_id=main_wallet.id,
                        description=fake.company(),
                    ))

                month_start = (month_start - timedelta(days=1)).replace(day=1)

            print(f"User {i + 1} ({user.email}) seeded.")

        print("Successfully seeded database.")

    except Exception as e:
        print(f"An error occurred: {e}")
        import traceback
        traceback.print_exc()
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    seed_database()
