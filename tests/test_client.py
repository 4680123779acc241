from datetime import date

import pytest

from life_ledger.auth import create_access_token
from life_ledger.client.api import ApiError, LifeLedgerClient
from life_ledger.client.dashboard import Dashboard
from life_ledger.models.budget import BudgetCreate, BudgetUpdate
from life_ledger.models.category import CategoryCreate, CategoryUpdate
from life_ledger.models.habit import HabitCreate, HabitLogCreate
from life_ledger.models.task import SubtaskIn, TaskCreate, TaskUpdate
from life_ledger.models.transaction import TransactionCreate


@pytest.fixture
def api(client):
    """Client for the unauthenticated, file-backed resources."""
    return LifeLedgerClient(base_url="http://testserver", session=client)


@pytest.fixture
def user_api(client, settings):
    """Client carrying a session token for user-1."""
    return LifeLedgerClient(base_url="http://testserver", session=client,
                            token=create_access_token("user-1", settings))


class _BrokenResponse:
    status_code = 502

    def json(self):
        raise ValueError("not json")


class _BrokenSession:
    def request(self, method, url, **kwargs):
        return _BrokenResponse()


class _GarbledResponse(_BrokenResponse):
    status_code = 200


class _GarbledSession:
    def request(self, method, url, **kwargs):
        return _GarbledResponse()


class TestLifeLedgerClient:
    """Typed calls against the running app."""

    def test_transactions_round_trip(self, api):
        created = api.create_transaction(TransactionCreate(
            name="Coffee", category="Food", date=date(2024, 3, 1), amount=4.5, type="expense",
        ))

        assert created.id > 0
        assert [t.name for t in api.get_transactions()] == ["Coffee"]
        assert api.delete_transaction(created.id).success is True
        assert api.get_transactions() == []

    def test_budget_create_sends_only_given_fields(self, api):
        budget = api.create_budget(BudgetCreate(category="Food"))

        assert budget.limit == 500
        assert api.update_budget(BudgetUpdate(category="Food", limit=250)).limit == 250

    def test_server_error_message_is_raised(self, api):
        api.create_budget(BudgetCreate(category="Food"))

        with pytest.raises(ApiError) as excinfo:
            api.create_budget(BudgetCreate(category="Food"))

        assert excinfo.value.status_code == 400

    def test_unauthorized(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.get_categories()

        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Unauthorized"

    def test_fallback_message_when_body_is_not_json(self):
        api = LifeLedgerClient(base_url="http://example.invalid", session=_BrokenSession())

        with pytest.raises(ApiError) as excinfo:
            api.get_tasks()

        assert excinfo.value.message == "Request failed with status 502"

    def test_success_with_non_json_body_raises_api_error(self):
        api = LifeLedgerClient(base_url="http://example.invalid", session=_GarbledSession())

        with pytest.raises(ApiError) as excinfo:
            api.get_tasks()

        assert excinfo.value.status_code == 200
        assert "Invalid JSON" in excinfo.value.message

    def test_setup_and_habit_stats(self, user_api):
        result = user_api.run_setup()
        assert result.initialized == 10
        assert user_api.get_setup_status().initialized is True

        habit = user_api.create_habit(HabitCreate(title="Stretch", start_date=date(2024, 1, 1)))
        user_api.log_habit(HabitLogCreate(habit_id=habit.id, date=date(2024, 1, 2)))

        stats = user_api.get_habit_stats(date(2024, 1, 1), date(2024, 1, 2))

        assert stats.logs == {habit.id: {"2024-01-02": 1.0}}
        assert [s.percentage for s in stats.daily_stats] == [0.0, 100.0]

    def test_stats_endpoints(self, api):
        assert len(api.get_kpi_stats()) == 4
        assert len(api.get_analytics_stats()) == 3
        assert api.get_monthly_trends()[0].name == "Jan"
        assert api.get_recurring_bills() == []


class TestDashboard:
    """Cached reads and mutations through the dashboard."""

    def test_mutation_invalidates_list(self, api):
        dashboard = Dashboard(api)
        assert dashboard.transactions() == []

        dashboard.add_transaction(TransactionCreate(
            name="Rent", category="Housing", date=date(2024, 3, 1), amount=1500, type="expense",
        ))

        assert [t.name for t in dashboard.transactions()] == ["Rent"]

    def test_optimistic_task_update(self, api):
        dashboard = Dashboard(api)
        task = dashboard.add_task(TaskCreate(title="Write report", subtasks=[SubtaskIn(title="Outline")]))
        assert dashboard.tasks()[0].completed is False

        dashboard.update_task(task.id, TaskUpdate(completed=True, subtasks=[SubtaskIn(title="Draft")]))

        [stored] = dashboard.tasks()
        assert stored.completed is True
        assert [(s.id, s.title) for s in stored.subtasks] == [(1, "Draft")]

    def test_failed_optimistic_update_rolls_back(self, api, monkeypatch):
        dashboard = Dashboard(api)
        task = dashboard.add_task(TaskCreate(title="Keep me"))
        before = dashboard.tasks()

        def reject(task_id, changes):
            raise ApiError("Server rejected", 500)

        monkeypatch.setattr(api, "update_task", reject)
        with pytest.raises(ApiError) as excinfo:
            dashboard.update_task(task.id, TaskUpdate(title="Renamed"))

        assert excinfo.value.status_code == 500
        assert dashboard.cache.get_data("tasks") == before
        assert [t.title for t in dashboard.tasks()] == ["Keep me"]
        monkeypatch.undo()
        assert [t.title for t in api.get_tasks()] == ["Keep me"]

    def test_non_optimistic_update(self, user_api):
        dashboard = Dashboard(user_api)
        category = dashboard.add_category(CategoryCreate(name="Pets"))
        assert [c.name for c in dashboard.categories()] == ["Pets"]

        dashboard.update_category(CategoryUpdate(id=category.id, name="Animals"))

        assert [c.name for c in dashboard.categories()] == ["Animals"]

    def test_derived_views(self, api):
        dashboard = Dashboard(api)
        dashboard.add_budget(BudgetCreate(category="Food", limit=100))
        dashboard.add_transaction(TransactionCreate(
            name="Dinner", category="Food", date=date(2024, 5, 14), amount=60, type="expense",
        ))

        [stat] = dashboard.category_stats()
        buckets = dashboard.daily_expenses("week", today=date(2024, 5, 15))

        assert stat.spent == 60
        assert stat.percent == pytest.approx(60)
        assert [b.amount for b in buckets][1] == 60
        assert dashboard.task_overview().total == 0

    def test_remove_and_filter_tasks(self, api):
        dashboard = Dashboard(api)
        keep = dashboard.add_task(TaskCreate(title="Urgent", priority="high"))
        drop = dashboard.add_task(TaskCreate(title="Someday", priority="low"))

        dashboard.remove_task(drop.id)

        assert [t.id for t in dashboard.filtered_tasks("high")] == [keep.id]
        assert [t.id for t in dashboard.tasks()] == [keep.id]
