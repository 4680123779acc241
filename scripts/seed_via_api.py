import subprocess
import time
import os
import sys
import signal
import random
from datetime import date, timedelta
from faker import Faker

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from life_ledger.auth import create_access_token
from life_ledger.categories import EXPENSE_CATEGORIES, INSTALLMENT_CATEGORIES
from life_ledger.client.api import ApiError, LifeLedgerClient
from life_ledger.config import get_settings
from life_ledger.models.budget import BudgetUpdate
from life_ledger.models.card import CardCreate
from life_ledger.models.habit import HabitCreate, HabitLogCreate
from life_ledger.models.installment import InstallmentCreate
from life_ledger.models.task import SubtaskIn, TaskCreate
from life_ledger.models.task_category import TaskCategoryCreate
from life_ledger.models.transaction import TransactionCreate

# --- Configuration ---
BASE_URL = "http://127.0.0.1:8000"
UVICORN_COMMAND = ["uvicorn", "life_ledger.main:app"]
USER_ID = os.environ.get("SEED_USER_ID", "demo-user")

fake = Faker()


def seed_setup(client: LifeLedgerClient):
    print("--- Running Setup ---")
    result = client.run_setup()
    print(f"{result.initialized} budgets in place.")
    for budget in random.sample(result.budgets, k=min(3, len(result.budgets))):
        client.update_budget(BudgetUpdate(category=budget.category, limit=round(budget.limit * 1.1, 2)))


def seed_transactions(client: LifeLedgerClient):
    print("--- Seeding Transactions ---")
    for _ in range(60):
        category = random.choice(EXPENSE_CATEGORIES)
        client.create_transaction(TransactionCreate(
            name=fake.company(),
            category=category.value,
            date=fake.date_between(start_date="-60d", end_date="today"),
            amount=round(random.uniform(4, 250), 2),
            type="expense",
            icon=category.icon,
        ))
    client.create_transaction(TransactionCreate(
        name="Paycheck", category="Salary", date=date.today().replace(day=1),
        amount=4200, type="income", icon="💼",
    ))


def seed_cards_and_installments(client: LifeLedgerClient):
    print("--- Seeding Cards & Installments ---")
    client.create_card(CardCreate(
        bank_name=fake.company(), holder=fake.name(), balance=round(random.uniform(500, 8000), 2),
        number=fake.credit_card_number(), expiry=fake.credit_card_expire(),
    ))
    for category in random.sample(INSTALLMENT_CATEGORIES, k=2):
        client.create_installment(InstallmentCreate(
            name=f"{fake.word().title()} purchase",
            provider=random.choice(["Affirm", "Klarna"]),
            total_amount=round(random.uniform(300, 2000), 2),
            total_months=12,
            category=category.value,
        ))


def seed_tasks(client: LifeLedgerClient):
    print("--- Seeding Tasks ---")
    for name in ["Work", "Personal"]:
        try:
            client.create_task_category(TaskCategoryCreate(name=name, color=fake.hex_color()))
        except ApiError as e:
            # Already created by an earlier run
            if e.status_code != 409:
                raise
    for _ in range(8):
        client.create_task(TaskCreate(
            title=fake.sentence(nb_words=4).rstrip("."),
            category=random.choice(["Work", "Personal"]),
            priority=random.choice(["low", "medium", "high"]),
            due_date=fake.date_between(start_date="today", end_date="+14d"),
            subtasks=[SubtaskIn(title=fake.sentence(nb_words=3).rstrip(".")) for _ in range(2)],
        ))


def seed_habits(client: LifeLedgerClient):
    print("--- Seeding Habits ---")
    start = date.today() - timedelta(days=14)
    habit = client.create_habit(HabitCreate(title="Meditate", start_date=start))
    for offset in range(15):
        if random.random() < 0.75:
            client.log_habit(HabitLogCreate(habit_id=habit.id, date=start + timedelta(days=offset)))


def main():
    """Starts the server, seeds sample data through the HTTP API, and shuts down the server."""

    print("--- Migrating database with Alembic ---")
    try:
        subprocess.run(["alembic", "upgrade", "head"], check=True, capture_output=True, text=True)
        print("Database is up to date.")
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        print(f"Error during migration: {e}")
        if hasattr(e, 'stderr') and e.stderr:
            print(e.stderr)
        return

    server_process = subprocess.Popen(UVICORN_COMMAND)
    time.sleep(5)
    print(f"Server started with PID: {server_process.pid}")

    try:
        token = create_access_token(USER_ID, get_settings(), expires_delta=timedelta(minutes=10))
        client = LifeLedgerClient(BASE_URL, token=token)

        seed_setup(client)
        seed_transactions(client)
        seed_cards_and_installments(client)
        seed_tasks(client)
        seed_habits(client)

        print("\n--- Seeding Complete ---")

    except ApiError as e:
        print(f"Error: HTTP {e.status_code}: {e.message}")
    finally:
        if server_process:
            print("\n--- Shutting down server ---")
            os.kill(server_process.pid, signal.SIGTERM)
            server_process.wait()
            print("Server shut down.")

if __name__ == "__main__":
    main()
