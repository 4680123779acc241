import json
from datetime import date

import pytest

from life_ledger.config import Settings, FILE_BACKEND, SQL_BACKEND
from life_ledger.db.core import ConflictError, StorageError, HabitDB, HabitLogDB
from life_ledger.db.json_store import JsonFileStore
from life_ledger.db.registry import StoreRegistry
from life_ledger.db.sql_store import SqlStore


class TestJsonFileStore:
    """Tests for the flat JSON file backend."""

    def test_list_missing_file_is_empty(self, json_store):
        assert json_store.list("transactions") == []

    def test_insert_assigns_timestamp_ids(self, json_store):
        first = json_store.insert("transactions", {"name": "Coffee", "amount": 4.5})
        second = json_store.insert("transactions", {"name": "Lunch", "amount": 12})

        assert first["id"] > 1_000_000_000_000
        assert second["id"] > first["id"]

    def test_records_are_written_as_given(self, json_store, settings):
        json_store.insert("cards", {"bankName": "Chase", "isFrozen": False})

        with open(settings.json_db_path, encoding="utf-8") as f:
            data = json.load(f)

        assert data["cards"][0]["bankName"] == "Chase"
        assert data["cards"][0]["isFrozen"] is False
        assert set(["transactions", "budgets", "cards", "installments", "tasks"]) <= set(data)

    def test_update_merges_and_keeps_id(self, json_store):
        task = json_store.insert("tasks", {"title": "Write report", "completed": False})

        updated = json_store.update("tasks", task["id"], {"completed": True, "id": 1})

        assert updated["id"] == task["id"]
        assert updated["title"] == "Write report"
        assert updated["completed"] is True

    def test_update_missing_returns_none(self, json_store):
        assert json_store.update("tasks", 42, {"title": "x"}) is None

    def test_delete_reports_whether_a_record_matched(self, json_store):
        task = json_store.insert("tasks", {"title": "Temporary"})

        assert json_store.delete("tasks", task["id"]) is True
        assert json_store.delete("tasks", task["id"]) is False
        assert json_store.list("tasks") == []

    def test_budgets_are_keyed_by_category(self, json_store):
        json_store.insert("budgets", {"category": "Food", "limit": 300})

        budget = json_store.get("budgets", "Food")

        assert budget == {"category": "Food", "limit": 300}

    def test_upsert_overwrites_existing_record(self, json_store):
        first = json_store.upsert("habit_logs", {"habitId": 3, "date": "2024-02-01", "completedValue": 1},
                                  ["habitId", "date"])
        second = json_store.upsert("habit_logs", {"habitId": 3, "date": "2024-02-01", "completedValue": 5},
                                   ["habitId", "date"])

        logs = json_store.list("habit_logs")
        assert len(logs) == 1
        assert second["id"] == first["id"]
        assert logs[0]["completedValue"] == 5

    def test_user_scoping(self, json_store):
        json_store.insert("tasks", {"title": "Mine"}, user_id="alice")
        theirs = json_store.insert("tasks", {"title": "Theirs"}, user_id="bob")

        assert [t["title"] for t in json_store.list("tasks", user_id="alice")] == ["Mine"]
        assert json_store.get("tasks", theirs["id"], user_id="alice") is None
        assert json_store.delete("tasks", theirs["id"], user_id="alice") is False
        assert len(json_store.list("tasks")) == 2

    def test_corrupt_file_raises_storage_error(self, settings):
        settings.json_db_path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(settings.json_db_path)

        with pytest.raises(StorageError):
            store.list("transactions")

    def test_non_object_document_raises_storage_error(self, settings):
        settings.json_db_path.write_text("[]", encoding="utf-8")
        store = JsonFileStore(settings.json_db_path)

        with pytest.raises(StorageError):
            store.list("transactions")

    def test_failed_write_leaves_data_file_and_no_temp_files(self, json_store, settings):
        json_store.insert("tasks", {"title": "Keep me"})
        before = settings.json_db_path.read_text(encoding="utf-8")

        with pytest.raises(TypeError):
            json_store.insert("tasks", {"title": object()})

        assert settings.json_db_path.read_text(encoding="utf-8") == before
        assert sorted(p.name for p in settings.json_db_path.parent.iterdir()) == ["db.json"]

    def test_list_between_is_inclusive_and_scoped(self, json_store):
        for day in ("2024-01-09", "2024-01-10", "2024-01-12", "2024-01-13"):
            json_store.insert("habit_logs", {"habitId": 1, "date": day, "completedValue": 1}, user_id="alice")
        json_store.insert("habit_logs", {"habitId": 1, "date": "2024-01-11", "completedValue": 1}, user_id="bob")

        logs = json_store.list_between("habit_logs", "date", date(2024, 1, 10), date(2024, 1, 12), user_id="alice")

        assert [log["date"] for log in logs] == ["2024-01-10", "2024-01-12"]


class TestSqlStore:
    """Tests for the relational backend."""

    def test_insert_round_trips_camel_case(self, sql_store):
        habit = sql_store.insert("habits", {
            "title": "Read",
            "startDate": "2024-01-10",
            "goalTarget": 2,
            "activeFromDate": None,
        }, user_id="alice")

        assert habit["id"] is not None
        assert habit["userId"] == "alice"
        assert habit["startDate"] == "2024-01-10"
        assert habit["goalTarget"] == 2
        assert "start_date" not in habit

    def test_unknown_fields_are_ignored(self, sql_store):
        category = sql_store.insert("task_categories", {"name": "Work", "notAColumn": True}, user_id="alice")

        assert category["name"] == "Work"
        assert "notAColumn" not in category

    def test_rows_are_scoped_by_user(self, sql_store):
        mine = sql_store.insert("categories", {"name": "Food", "type": "expense"}, user_id="alice")
        sql_store.insert("categories", {"name": "Rent", "type": "expense"}, user_id="bob")

        assert [c["name"] for c in sql_store.list("categories", user_id="alice")] == ["Food"]
        assert sql_store.get("categories", mine["id"], user_id="bob") is None
        assert sql_store.update("categories", mine["id"], {"name": "Hacked"}, user_id="bob") is None
        assert sql_store.delete("categories", mine["id"], user_id="bob") is False
        assert sql_store.get("categories", mine["id"], user_id="alice")["name"] == "Food"

    def test_update_cannot_change_owner(self, sql_store):
        category = sql_store.insert("task_categories", {"name": "Home"}, user_id="alice")

        updated = sql_store.update("task_categories", category["id"], {"userId": "bob", "color": "#fff"},
                                   user_id="alice")

        assert updated["userId"] == "alice"
        assert updated["color"] == "#fff"

    def test_duplicate_task_category_raises_conflict(self, sql_store):
        sql_store.insert("task_categories", {"name": "Work"}, user_id="alice")

        with pytest.raises(ConflictError):
            sql_store.insert("task_categories", {"name": "Work"}, user_id="alice")

        # The same name is fine for another user
        assert sql_store.insert("task_categories", {"name": "Work"}, user_id="bob")["name"] == "Work"

    def test_habit_log_upsert_overwrites(self, sql_store, db_session):
        first = sql_store.upsert("habit_logs", {"habitId": 3, "date": "2024-02-01", "completedValue": 1},
                                 ["habitId", "date"], user_id="alice")
        second = sql_store.upsert("habit_logs", {"habitId": 3, "date": "2024-02-01", "completedValue": 4},
                                  ["habitId", "date"], user_id="alice")

        assert db_session.query(HabitLogDB).count() == 1
        assert second["id"] == first["id"]
        assert second["completedValue"] == 4
        assert second["date"] == "2024-02-01"

    def test_subtasks_are_stored_as_json(self, sql_store):
        task = sql_store.insert("tasks", {
            "title": "Plan trip",
            "subtasks": [{"id": 1, "title": "Book flights", "completed": False}],
        })

        assert task["subtasks"] == [{"id": 1, "title": "Book flights", "completed": False}]

    def test_list_between_filters_in_the_query(self, sql_store):
        for day in ("2024-01-09", "2024-01-10", "2024-01-12", "2024-01-13"):
            sql_store.insert("habit_logs", {"habitId": 1, "date": day, "completedValue": 1}, user_id="alice")
        sql_store.insert("habit_logs", {"habitId": 1, "date": "2024-01-11", "completedValue": 1}, user_id="bob")

        logs = sql_store.list_between("habit_logs", "date", date(2024, 1, 10), date(2024, 1, 12), user_id="alice")
        by_string = sql_store.list_between("habit_logs", "date", "2024-01-10", "2024-01-12", user_id="alice")

        assert [log["date"] for log in logs] == ["2024-01-10", "2024-01-12"]
        assert by_string == logs

    def test_missing_table_raises_storage_error(self, sql_store, db_session):
        HabitDB.__table__.drop(db_session.get_bind())

        with pytest.raises(StorageError):
            sql_store.get("habits", 1, user_id="alice")
        with pytest.raises(StorageError):
            sql_store.update("habits", 1, {"title": "Run"}, user_id="alice")
        with pytest.raises(StorageError):
            sql_store.delete("habits", 1, user_id="alice")


class TestStoreRegistry:
    """Tests for routing resources to backends."""

    def test_default_routing(self, settings, db_session):
        stores = StoreRegistry(settings, db_session)

        assert settings.backend_for("transactions") == FILE_BACKEND
        assert settings.backend_for("habits") == SQL_BACKEND
        assert isinstance(stores.for_resource("budgets"), JsonFileStore)
        assert isinstance(stores.for_resource("task_categories"), SqlStore)

    def test_file_backed_resources_are_configurable(self, tmp_path, db_session):
        settings = Settings(json_db_path=tmp_path / "db.json", file_backed_resources=("habits",))
        stores = StoreRegistry(settings, db_session)

        assert isinstance(stores.for_resource("habits"), JsonFileStore)
        assert isinstance(stores.for_resource("transactions"), SqlStore)

    def test_auth_requirement_follows_backend(self, settings):
        assert settings.requires_auth("habits") is True
        assert settings.requires_auth("tasks") is False

        settings.require_auth_for_file_resources = True
        assert settings.requires_auth("tasks") is True
