from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from life_ledger.client.api import LifeLedgerClient
from life_ledger.client.cache import QueryCache
from life_ledger.crud.crud_task import number_subtasks
from life_ledger.models.budget import BudgetCreate, BudgetResponse, BudgetUpdate, CategoryStat
from life_ledger.models.card import CardCreate, CardResponse, CardUpdate
from life_ledger.models.category import CategoryCreate, CategoryResponse, CategoryUpdate
from life_ledger.models.habit import HabitCreate, HabitKPIs, HabitLogCreate, HabitResponse, HabitStatsResponse, HabitUpdate
from life_ledger.models.installment import InstallmentCreate, InstallmentResponse, InstallmentSummary, InstallmentUpdate
from life_ledger.models.stats import ExpenseBucket
from life_ledger.models.task import AdvancedTaskFilter, TaskCreate, TaskOverview, TaskResponse, TaskUpdate
from life_ledger.models.task_category import TaskCategoryCreate, TaskCategoryResponse, TaskCategoryUpdate
from life_ledger.models.transaction import TransactionCreate, TransactionResponse
from life_ledger.services import analytics

T = TypeVar("T")

DEFAULT_OPTIMISTIC_RESOURCES = ("tasks",)


def _merge_into(items: Optional[List], item_id: int, changes: Dict) -> List:
    """Shallow-merge ``changes`` into the item with ``item_id``; other items are left as they are."""
    merged = []
    for item in items or []:
        if getattr(item, "id", None) == item_id:
            item = type(item).model_validate({**item.model_dump(), **changes})
        merged.append(item)
    return merged


class Dashboard:
    """
    Cached view of one user's data.

    Readers go through the query cache; mutations invalidate the affected
    keys. Updates to the resources named in ``optimistic_resources`` are
    applied locally before the request is sent and rolled back if it fails.
    """

    def __init__(self, client: LifeLedgerClient, cache: Optional[QueryCache] = None,
                 optimistic_resources: Sequence[str] = DEFAULT_OPTIMISTIC_RESOURCES):
        self.client = client
        self.cache = cache or QueryCache()
        self.optimistic_resources = frozenset(optimistic_resources)

    def _update(self, key: str, item_id: int, changes, send: Callable[[], T]) -> T:
        if key not in self.optimistic_resources:
            return self.cache.mutate(key, send)
        local_changes = changes.model_dump(exclude_unset=True)
        local_changes.pop("id", None)
        if "subtasks" in local_changes:
            local_changes["subtasks"] = number_subtasks(local_changes["subtasks"] or [])
        return self.cache.mutate_optimistic(
            key, send, lambda items: _merge_into(items, item_id, local_changes)
        )

    # ===== READERS =====

    def transactions(self) -> List[TransactionResponse]:
        return self.cache.fetch("transactions", self.client.get_transactions)

    def budgets(self) -> List[BudgetResponse]:
        return self.cache.fetch("budgets", self.client.get_budgets)

    def cards(self) -> List[CardResponse]:
        return self.cache.fetch("cards", self.client.get_cards)

    def installments(self) -> List[InstallmentResponse]:
        return self.cache.fetch("installments", self.client.get_installments)

    def tasks(self) -> List[TaskResponse]:
        return self.cache.fetch("tasks", self.client.get_tasks)

    def categories(self) -> List[CategoryResponse]:
        return self.cache.fetch("categories", self.client.get_categories)

    def task_categories(self) -> List[TaskCategoryResponse]:
        return self.cache.fetch("task_categories", self.client.get_task_categories)

    def habits(self) -> List[HabitResponse]:
        return self.cache.fetch("habits", self.client.get_habits)

    def habit_stats(self, start: date, end: date) -> HabitStatsResponse:
        return self.cache.fetch(
            f"habits:stats:{start.isoformat()}:{end.isoformat()}",
            lambda: self.client.get_habit_stats(start, end),
        )

    # ===== DERIVED VIEWS =====

    def category_stats(self) -> List[CategoryStat]:
        return analytics.category_stats(self.transactions(), self.budgets())

    def daily_expenses(self, time_range: str, today: Optional[date] = None) -> List[ExpenseBucket]:
        return analytics.daily_expense_buckets(self.transactions(), time_range, today or date.today())

    def filtered_tasks(self, basic: str = "all", time_window: str = "all",
                       advanced: Optional[AdvancedTaskFilter] = None, today: Optional[date] = None) -> List[TaskResponse]:
        return analytics.filter_tasks(self.tasks(), basic, time_window, advanced, today)

    def task_overview(self) -> TaskOverview:
        return analytics.task_overview(self.tasks())

    def installment_summary(self) -> InstallmentSummary:
        return analytics.installment_summary(self.installments())

    def habit_kpis(self, start: date, end: date) -> HabitKPIs:
        stats = self.habit_stats(start, end)
        return analytics.habit_kpis(stats.daily_stats, stats.logs, stats.habits)

    # ===== MUTATIONS =====

    def add_transaction(self, transaction: TransactionCreate) -> TransactionResponse:
        return self.cache.mutate("transactions", lambda: self.client.create_transaction(transaction))

    def remove_transaction(self, transaction_id: int):
        return self.cache.mutate("transactions", lambda: self.client.delete_transaction(transaction_id))

    def add_budget(self, budget: BudgetCreate) -> BudgetResponse:
        return self.cache.mutate("budgets", lambda: self.client.create_budget(budget))

    def save_budget(self, budget: BudgetUpdate) -> BudgetResponse:
        return self.cache.mutate("budgets", lambda: self.client.update_budget(budget))

    def add_card(self, card: CardCreate) -> CardResponse:
        return self.cache.mutate("cards", lambda: self.client.create_card(card))

    def update_card(self, card_id: int, changes: CardUpdate) -> CardResponse:
        return self._update("cards", card_id, changes, lambda: self.client.update_card(card_id, changes))

    def remove_card(self, card_id: int):
        return self.cache.mutate("cards", lambda: self.client.delete_card(card_id))

    def add_installment(self, installment: InstallmentCreate) -> InstallmentResponse:
        return self.cache.mutate("installments", lambda: self.client.create_installment(installment))

    def update_installment(self, installment_id: int, changes: InstallmentUpdate) -> InstallmentResponse:
        return self._update("installments", installment_id, changes,
                            lambda: self.client.update_installment(installment_id, changes))

    def remove_installment(self, installment_id: int):
        return self.cache.mutate("installments", lambda: self.client.delete_installment(installment_id))

    def add_task(self, task: TaskCreate) -> TaskResponse:
        return self.cache.mutate("tasks", lambda: self.client.create_task(task))

    def update_task(self, task_id: int, changes: TaskUpdate) -> TaskResponse:
        return self._update("tasks", task_id, changes, lambda: self.client.update_task(task_id, changes))

    def remove_task(self, task_id: int):
        return self.cache.mutate("tasks", lambda: self.client.delete_task(task_id))

    def add_category(self, category: CategoryCreate) -> CategoryResponse:
        return self.cache.mutate("categories", lambda: self.client.create_category(category))

    def update_category(self, changes: CategoryUpdate) -> CategoryResponse:
        return self._update("categories", changes.id, changes, lambda: self.client.update_category(changes))

    def remove_category(self, category_id: int):
        return self.cache.mutate("categories", lambda: self.client.delete_category(category_id))

    def add_task_category(self, category: TaskCategoryCreate) -> TaskCategoryResponse:
        return self.cache.mutate("task_categories", lambda: self.client.create_task_category(category))

    def update_task_category(self, category_id: int, changes: TaskCategoryUpdate) -> TaskCategoryResponse:
        return self._update("task_categories", category_id, changes,
                            lambda: self.client.update_task_category(category_id, changes))

    def remove_task_category(self, category_id: int):
        return self.cache.mutate("task_categories", lambda: self.client.delete_task_category(category_id))

    def add_habit(self, habit: HabitCreate) -> HabitResponse:
        return self.cache.mutate("habits", lambda: self.client.create_habit(habit))

    def update_habit(self, habit_id: int, changes: HabitUpdate) -> HabitResponse:
        return self._update("habits", habit_id, changes, lambda: self.client.update_habit(habit_id, changes))

    def archive_habit(self, habit_id: int):
        return self.cache.mutate("habits", lambda: self.client.archive_habit(habit_id))

    def log_habit(self, log: HabitLogCreate):
        # Logs only feed the stats views, which live under "habits:"
        return self.cache.mutate("habits", lambda: self.client.log_habit(log))

    def run_setup(self):
        result = self.cache.mutate("categories", self.client.run_setup)
        self.cache.invalidate("budgets")
        return result
