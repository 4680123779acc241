import sys
import os
import random
from datetime import date, timedelta
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from life_ledger.categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES, INSTALLMENT_CATEGORIES
from life_ledger.config import get_settings
from life_ledger.crud import crud_card, crud_habit, crud_installment, crud_task, crud_task_category, crud_transaction
from life_ledger.db.core import init_db, session_local
from life_ledger.db.registry import StoreRegistry
from life_ledger.logging_config import setup_logging
from life_ledger.models.card import CardCreate
from life_ledger.models.habit import HabitCreate, HabitLogCreate
from life_ledger.models.installment import InstallmentCreate
from life_ledger.models.task import SubtaskIn, TaskCreate
from life_ledger.models.task_category import TaskCategoryCreate
from life_ledger.models.transaction import TransactionCreate
from life_ledger.services.setup import initialize_defaults

fake = Faker()

DEFAULT_USER_ID = "demo-user"


def seed_database(user_id: str = DEFAULT_USER_ID):
    """
    Fills both stores with sample data for one user.

    Relational resources are owned by ``user_id``; file-backed resources are
    written unscoped unless REQUIRE_AUTH_FOR_FILE_RESOURCES is set.
    """
    settings = get_settings()
    init_db()
    db = session_local()
    stores = StoreRegistry(settings, db)

    def owner(resource: str):
        return user_id if settings.requires_auth(resource) else None

    try:
        transactions = stores.for_resource(crud_transaction.RESOURCE)
        if crud_transaction.read_db_transactions(transactions, user_id=owner(crud_transaction.RESOURCE)):
            print("Store appears to be already seeded. Exiting.")
            return

        print(f"Seeding sample data for user '{user_id}'...")

        # 1. Default categories and budgets
        print("Creating default categories and budgets...")
        result = initialize_defaults(
            stores.for_resource("categories"), stores.for_resource("budgets"), settings,
            owner("categories"), budget_user_id=owner("budgets"),
        )
        print(f"{result.initialized} budgets in place.")

        # 2. Transactions over the last 90 days
        print("Creating transactions...")
        today = date.today()
        for _ in range(120):
            category = random.choice(EXPENSE_CATEGORIES)
            crud_transaction.create_db_transaction(transactions, TransactionCreate(
                name=fake.company(),
                category=category.value,
                date=fake.date_between(start_date="-90d", end_date="today"),
                amount=round(random.uniform(4, 250), 2),
                type="expense",
                icon=category.icon,
            ), user_id=owner(crud_transaction.RESOURCE))
        for months_back in range(3):
            payday = (today.replace(day=1) - timedelta(days=30 * months_back)).replace(day=1)
            income = random.choice(INCOME_CATEGORIES)
            crud_transaction.create_db_transaction(transactions, TransactionCreate(
                name="Paycheck", category=income.value, date=payday,
                amount=round(random.uniform(3500, 5500), 2), type="income", icon=income.icon,
            ), user_id=owner(crud_transaction.RESOURCE))

        # 3. Cards
        print("Creating cards...")
        cards = stores.for_resource(crud_card.RESOURCE)
        crud_card.create_db_card(cards, CardCreate(
            bank_name=fake.company(), holder=fake.name(), balance=round(random.uniform(500, 8000), 2),
            type="debit", number=fake.credit_card_number(), expiry=fake.credit_card_expire(),
        ), user_id=owner(crud_card.RESOURCE))
        crud_card.create_db_card(cards, CardCreate(
            bank_name=fake.company(), holder=fake.name(), balance=round(random.uniform(0, 2000), 2),
            limit=5000, type="credit", number=fake.credit_card_number(), expiry=fake.credit_card_expire(),
            color="bg-indigo-600",
        ), user_id=owner(crud_card.RESOURCE))

        # 4. Installment plans
        print("Creating installment plans...")
        installments = stores.for_resource(crud_installment.RESOURCE)
        for category in random.sample(INSTALLMENT_CATEGORIES, k=3):
            total_months = random.choice([6, 12, 24])
            paid_months = random.randint(0, total_months)
            total_amount = round(random.uniform(300, 3000), 2)
            crud_installment.create_db_installment(installments, InstallmentCreate(
                name=f"{fake.word().title()} purchase",
                provider=random.choice(["Affirm", "Klarna", "Afterpay"]),
                total_amount=total_amount,
                paid_amount=round(total_amount / total_months * paid_months, 2),
                total_months=total_months,
                paid_months=paid_months,
                start_date=today - timedelta(days=30 * paid_months),
                category=category.value,
            ), user_id=owner(crud_installment.RESOURCE))

        # 5. Task categories and tasks
        print("Creating tasks...")
        task_categories = stores.for_resource(crud_task_category.RESOURCE)
        category_names = ["Work", "Personal", "Errands"]
        for name in category_names:
            crud_task_category.create_db_task_category(
                task_categories, TaskCategoryCreate(name=name, color=fake.hex_color()),
                user_id=owner(crud_task_category.RESOURCE),
            )
        tasks = stores.for_resource(crud_task.RESOURCE)
        for _ in range(12):
            completed = random.random() < 0.3
            crud_task.create_db_task(tasks, TaskCreate(
                title=fake.sentence(nb_words=4).rstrip("."),
                category=random.choice(category_names),
                priority=random.choice(["low", "medium", "high"]),
                due_date=fake.date_between(start_date="-7d", end_date="+21d") if random.random() < 0.8 else None,
                completed=completed,
                status="done" if completed else random.choice(["todo", "in-progress"]),
                subtasks=[SubtaskIn(title=fake.sentence(nb_words=3).rstrip("."))
                          for _ in range(random.randint(0, 3))],
            ), user_id=owner(crud_task.RESOURCE))

        # 6. Habits with a month of logs
        print("Creating habits...")
        habit_store = stores.for_resource(crud_habit.RESOURCE)
        log_store = stores.for_resource(crud_habit.LOG_RESOURCE)
        start = today - timedelta(days=30)
        for title, goal in [("Drink water", 8), ("Read", 1), ("Exercise", 1)]:
            habit = crud_habit.create_db_habit(habit_store, HabitCreate(
                title=title, start_date=start, goal_target=goal,
            ), user_id=owner(crud_habit.RESOURCE))
            for offset in range(31):
                if random.random() < 0.7:
                    crud_habit.log_db_habit(habit_store, log_store, HabitLogCreate(
                        habit_id=habit["id"],
                        date=start + timedelta(days=offset),
                        completed_value=random.randint(1, goal) if goal > 1 else 1,
                    ), user_id=owner(crud_habit.LOG_RESOURCE))

        print("Successfully seeded sample data.")

    except Exception as e:
        print(f"An error occurred: {e}")
        import traceback
        traceback.print_exc()
        db.rollback()
        raise SystemExit(1)
    finally:
        db.close()

if __name__ == "__main__":
    setup_logging()
    seed_database(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_USER_ID)
