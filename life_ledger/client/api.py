"""
Typed access to the Life Ledger HTTP API.

One method per endpoint. Every call performs exactly one request: no
retries, no caching, no batching. Non-2xx responses raise ``ApiError`` with
the server's ``error`` message.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter

from life_ledger.logging_config import get_logger
from life_ledger.models.budget import BudgetCreate, BudgetResponse, BudgetUpdate
from life_ledger.models.card import CardCreate, CardResponse, CardUpdate
from life_ledger.models.category import CategoryCreate, CategoryResponse, CategoryUpdate
from life_ledger.models.common import SuccessResponse
from life_ledger.models.habit import (
    HabitCreate, HabitLogCreate, HabitLogResponse, HabitResponse, HabitStatsResponse, HabitUpdate,
)
from life_ledger.models.installment import InstallmentCreate, InstallmentResponse, InstallmentUpdate
from life_ledger.models.setup import SetupResult, SetupStatus
from life_ledger.models.stats import KPIStat, MonthlyTrend
from life_ledger.models.task import TaskCreate, TaskResponse, TaskUpdate
from life_ledger.models.task_category import TaskCategoryCreate, TaskCategoryResponse, TaskCategoryUpdate
from life_ledger.models.transaction import TransactionCreate, TransactionResponse

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """A request that reached the server but came back with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


def _body(model: Optional[BaseModel], exclude_unset: bool = False) -> Optional[Dict[str, Any]]:
    if model is None:
        return None
    return model.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)


class LifeLedgerClient:
    """
    Client for the ``/api`` endpoints.

    ``session`` may be a ``requests.Session`` or anything with the same
    ``request`` signature (the FastAPI ``TestClient`` works). ``token`` is the
    auth provider's session token, sent as a Bearer header.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", session=None, token: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.token = token
        self.timeout = timeout

    # ===== TRANSPORT =====

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                 params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/api{path}"
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        response = self.session.request(method, url, json=json, params=params, headers=headers,
                                        timeout=self.timeout)

        if not 200 <= response.status_code < 300:
            message = f"Request failed with status {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("error"):
                    message = str(body["error"])
            except ValueError:
                pass
            logger.debug(f"{method} {path} failed: {response.status_code} {message}")
            raise ApiError(message, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.debug(f"{method} {path} returned a non-JSON body")
            raise ApiError(f"Invalid JSON in response with status {response.status_code}", response.status_code) from e

    @staticmethod
    def _parse(model: Type[T], data: Any) -> T:
        return TypeAdapter(model).validate_python(data)

    # ===== TRANSACTIONS =====

    def get_transactions(self) -> List[TransactionResponse]:
        return self._parse(List[TransactionResponse], self._request("GET", "/transactions"))

    def create_transaction(self, transaction: TransactionCreate) -> TransactionResponse:
        return self._parse(TransactionResponse, self._request("POST", "/transactions", json=_body(transaction)))

    def delete_transaction(self, transaction_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/transactions/{transaction_id}"))

    # ===== BUDGETS =====

    def get_budgets(self) -> List[BudgetResponse]:
        return self._parse(List[BudgetResponse], self._request("GET", "/budgets"))

    def create_budget(self, budget: BudgetCreate) -> BudgetResponse:
        return self._parse(BudgetResponse, self._request("POST", "/budgets", json=_body(budget, exclude_unset=True)))

    def update_budget(self, budget: BudgetUpdate) -> BudgetResponse:
        return self._parse(BudgetResponse, self._request("PUT", "/budgets", json=_body(budget, exclude_unset=True)))

    # ===== CARDS =====

    def get_cards(self) -> List[CardResponse]:
        return self._parse(List[CardResponse], self._request("GET", "/cards"))

    def create_card(self, card: CardCreate) -> CardResponse:
        return self._parse(CardResponse, self._request("POST", "/cards", json=_body(card)))

    def update_card(self, card_id: int, changes: CardUpdate) -> CardResponse:
        return self._parse(CardResponse, self._request("PUT", f"/cards/{card_id}",
                                                       json=_body(changes, exclude_unset=True)))

    def delete_card(self, card_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/cards/{card_id}"))

    # ===== INSTALLMENTS =====

    def get_installments(self) -> List[InstallmentResponse]:
        return self._parse(List[InstallmentResponse], self._request("GET", "/installments"))

    def create_installment(self, installment: InstallmentCreate) -> InstallmentResponse:
        return self._parse(InstallmentResponse, self._request("POST", "/installments", json=_body(installment)))

    def update_installment(self, installment_id: int, changes: InstallmentUpdate) -> InstallmentResponse:
        return self._parse(InstallmentResponse, self._request("PUT", f"/installments/{installment_id}",
                                                              json=_body(changes, exclude_unset=True)))

    def delete_installment(self, installment_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/installments/{installment_id}"))

    # ===== TASKS =====

    def get_tasks(self) -> List[TaskResponse]:
        return self._parse(List[TaskResponse], self._request("GET", "/tasks"))

    def create_task(self, task: TaskCreate) -> TaskResponse:
        return self._parse(TaskResponse, self._request("POST", "/tasks", json=_body(task)))

    def update_task(self, task_id: int, changes: TaskUpdate) -> TaskResponse:
        return self._parse(TaskResponse, self._request("PUT", f"/tasks/{task_id}",
                                                       json=_body(changes, exclude_unset=True)))

    def delete_task(self, task_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/tasks/{task_id}"))

    # ===== FINANCE CATEGORIES =====

    def get_categories(self) -> List[CategoryResponse]:
        return self._parse(List[CategoryResponse], self._request("GET", "/categories"))

    def create_category(self, category: CategoryCreate) -> CategoryResponse:
        return self._parse(CategoryResponse, self._request("POST", "/categories", json=_body(category)))

    def update_category(self, changes: CategoryUpdate) -> CategoryResponse:
        return self._parse(CategoryResponse, self._request("PUT", "/categories",
                                                           json=_body(changes, exclude_unset=True)))

    def delete_category(self, category_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/categories/{category_id}"))

    # ===== TASK CATEGORIES =====

    def get_task_categories(self) -> List[TaskCategoryResponse]:
        return self._parse(List[TaskCategoryResponse], self._request("GET", "/task-categories"))

    def create_task_category(self, category: TaskCategoryCreate) -> TaskCategoryResponse:
        return self._parse(TaskCategoryResponse, self._request("POST", "/task-categories", json=_body(category)))

    def update_task_category(self, category_id: int, changes: TaskCategoryUpdate) -> TaskCategoryResponse:
        return self._parse(TaskCategoryResponse, self._request("PUT", f"/task-categories/{category_id}",
                                                               json=_body(changes, exclude_unset=True)))

    def delete_task_category(self, category_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/task-categories/{category_id}"))

    # ===== HABITS =====

    def get_habits(self) -> List[HabitResponse]:
        return self._parse(List[HabitResponse], self._request("GET", "/habits"))

    def create_habit(self, habit: HabitCreate) -> HabitResponse:
        return self._parse(HabitResponse, self._request("POST", "/habits", json=_body(habit)))

    def update_habit(self, habit_id: int, changes: HabitUpdate) -> HabitResponse:
        return self._parse(HabitResponse, self._request("PUT", f"/habits/{habit_id}",
                                                        json=_body(changes, exclude_unset=True)))

    def archive_habit(self, habit_id: int) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/habits/{habit_id}"))

    def log_habit(self, log: HabitLogCreate) -> HabitLogResponse:
        return self._parse(HabitLogResponse, self._request("POST", "/habits/log", json=_body(log)))

    def get_habit_stats(self, start_date: date, end_date: date) -> HabitStatsResponse:
        params = {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()}
        return self._parse(HabitStatsResponse, self._request("GET", "/habits/stats", params=params))

    # ===== SETUP & STATS =====

    def get_setup_status(self) -> SetupStatus:
        return self._parse(SetupStatus, self._request("GET", "/setup"))

    def run_setup(self) -> SetupResult:
        return self._parse(SetupResult, self._request("POST", "/setup"))

    def get_kpi_stats(self) -> List[KPIStat]:
        return self._parse(List[KPIStat], self._request("GET", "/stats", params={"type": "kpi"}))

    def get_monthly_trends(self) -> List[MonthlyTrend]:
        return self._parse(List[MonthlyTrend], self._request("GET", "/stats", params={"type": "trends"}))

    def get_analytics_stats(self) -> List[KPIStat]:
        return self._parse(List[KPIStat], self._request("GET", "/stats", params={"type": "analytics"}))

    def get_recurring_bills(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/stats", params={"type": "recurring"})
