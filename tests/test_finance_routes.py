from fastapi.testclient import TestClient

from life_ledger.crud import crud_transaction
from life_ledger.main import app


class TestTransactionRoutes:
    """Tests for /api/transactions."""

    def test_create_and_list(self, client):
        response = client.post("/api/transactions", json={
            "name": " Groceries ",
            "category": "Food",
            "date": "2024-03-02",
            "amount": -54.321,
            "type": "expense",
        })

        assert response.status_code == 200
        created = response.json()
        assert created["name"] == "Groceries"
        assert created["amount"] == 54.32
        assert created["icon"] == "💳"
        assert isinstance(created["id"], int)

        listed = client.get("/api/transactions").json()
        assert [t["id"] for t in listed] == [created["id"]]

    def test_list_is_newest_first(self, client):
        for day in ("2024-01-05", "2024-03-01", "2024-02-10"):
            client.post("/api/transactions", json={
                "name": "Item", "category": "Other", "date": day, "amount": 1, "type": "expense",
            })

        dates = [t["date"] for t in client.get("/api/transactions").json()]

        assert dates == ["2024-03-01", "2024-02-10", "2024-01-05"]

    def test_missing_field_is_400_with_error_body(self, client):
        response = client.post("/api/transactions", json={"name": "No amount", "category": "Food"})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_delete_is_idempotent(self, client):
        created = client.post("/api/transactions", json={
            "name": "Salary", "category": "Salary", "date": "2024-03-01", "amount": 3000, "type": "income",
        }).json()

        first = client.delete(f"/api/transactions/{created['id']}")
        second = client.delete(f"/api/transactions/{created['id']}")

        assert first.json() == {"success": True}
        assert second.status_code == 200
        assert second.json() == {"success": True}
        assert client.get("/api/transactions").json() == []

    def test_file_resources_skip_auth_by_default(self, client):
        assert client.get("/api/transactions").status_code == 200

    def test_file_resources_can_require_auth(self, client, settings, auth_headers):
        settings.require_auth_for_file_resources = True

        assert client.get("/api/transactions").status_code == 401
        assert client.get("/api/transactions", headers=auth_headers).status_code == 200

    def test_storage_failure_is_500(self, client, settings):
        settings.json_db_path.write_text("not json", encoding="utf-8")

        response = client.get("/api/transactions")

        assert response.status_code == 500
        assert "error" in response.json()

    def test_non_object_data_file_is_500_with_error_body(self, client, settings):
        settings.json_db_path.write_text("[]", encoding="utf-8")

        response = client.get("/api/transactions")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert "error" in response.json()

    def test_unexpected_error_is_500_with_error_body(self, client, monkeypatch):
        def explode(store, user_id=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(crud_transaction, "read_db_transactions", explode)
        # The overrides installed by the client fixture still apply
        lenient = TestClient(app, raise_server_exceptions=False)

        response = lenient.get("/api/transactions")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestBudgetRoutes:
    """Tests for /api/budgets."""

    def test_post_defaults_limit_and_color(self, client):
        response = client.post("/api/budgets", json={"category": "Food"})

        assert response.status_code == 200
        assert response.json() == {"category": "Food", "limit": 500.0, "color": "#52525b"}

    def test_unknown_category_gets_fallback_color(self, client):
        budget = client.post("/api/budgets", json={"category": "Pets", "limit": 40}).json()

        assert budget["color"] == "#6b7280"

    def test_duplicate_post_is_400_but_put_updates(self, client):
        assert client.post("/api/budgets", json={"category": "Food", "limit": 300}).status_code == 200

        duplicate = client.post("/api/budgets", json={"category": "Food", "limit": 999})
        assert duplicate.status_code == 400
        assert "error" in duplicate.json()

        updated = client.put("/api/budgets", json={"category": "Food", "limit": 450})
        assert updated.status_code == 200
        assert updated.json()["limit"] == 450

        budgets = client.get("/api/budgets").json()
        assert len(budgets) == 1
        assert budgets[0]["limit"] == 450

    def test_put_creates_missing_budget(self, client):
        response = client.put("/api/budgets", json={"category": "Transport", "limit": 120, "color": "#000000"})

        assert response.status_code == 200
        assert client.get("/api/budgets").json() == [
            {"category": "Transport", "limit": 120.0, "color": "#000000"}
        ]

    def test_list_is_ordered_by_category(self, client):
        for category in ("Utilities", "Food", "Housing"):
            client.post("/api/budgets", json={"category": category})

        assert [b["category"] for b in client.get("/api/budgets").json()] == ["Food", "Housing", "Utilities"]

    def test_negative_limit_is_rejected(self, client):
        assert client.post("/api/budgets", json={"category": "Food", "limit": -1}).status_code == 400


class TestCardRoutes:
    """Tests for /api/cards."""

    def test_number_is_truncated_to_last_four(self, client):
        response = client.post("/api/cards", json={
            "bankName": "Chase",
            "holder": "Jordan Smith",
            "balance": 1200,
            "type": "debit",
            "number": "4111 1111 1111 1234",
            "expiry": "12/27",
        })

        assert response.status_code == 200
        card = response.json()
        assert card["number"] == "1234"
        assert card["isFrozen"] is False
        assert card["color"] == "bg-slate-900"

    def test_empty_number_becomes_zeros(self, client):
        card = client.post("/api/cards", json={"bankName": "Amex", "holder": "J", "type": "credit",
                                               "limit": 5000}).json()

        assert card["number"] == "0000"
        assert card["limit"] == 5000

    def test_update_is_disabled_by_default(self, client):
        card = client.post("/api/cards", json={"bankName": "Chase", "holder": "J", "number": "9876"}).json()

        response = client.put(f"/api/cards/{card['id']}", json={"isFrozen": True})

        assert response.status_code == 405
        assert response.json() == {"error": "Card updates are disabled"}

    def test_update_when_enabled(self, client, settings):
        settings.allow_card_updates = True
        card = client.post("/api/cards", json={"bankName": "Chase", "holder": "J", "number": "9876"}).json()

        response = client.put(f"/api/cards/{card['id']}", json={"isFrozen": True, "number": "5555666677778888"})

        assert response.status_code == 200
        assert response.json()["isFrozen"] is True
        assert response.json()["number"] == "8888"
        assert client.put("/api/cards/1", json={"isFrozen": True}).status_code == 404

    def test_delete(self, client):
        card = client.post("/api/cards", json={"bankName": "Chase", "holder": "J"}).json()

        assert client.delete(f"/api/cards/{card['id']}").json() == {"success": True}
        assert client.get("/api/cards").json() == []


class TestInstallmentRoutes:
    """Tests for /api/installments."""

    PLAN = {
        "name": "Laptop",
        "provider": "Affirm",
        "totalAmount": 1200,
        "totalMonths": 12,
        "startDate": "2024-01-15",
        "category": "Tech",
    }

    def test_create_applies_defaults(self, client):
        plan = client.post("/api/installments", json=self.PLAN).json()

        assert plan["paidAmount"] == 0
        assert plan["paidMonths"] == 0
        assert plan["startDate"] == "2024-01-15"

    def test_update_and_delete_enabled_by_default(self, client):
        plan = client.post("/api/installments", json=self.PLAN).json()

        updated = client.put(f"/api/installments/{plan['id']}", json={"paidMonths": 2, "paidAmount": 200})
        assert updated.status_code == 200
        assert updated.json()["paidMonths"] == 2
        assert updated.json()["name"] == "Laptop"

        assert client.delete(f"/api/installments/{plan['id']}").json() == {"success": True}
        assert client.get("/api/installments").json() == []

    def test_paid_months_cannot_exceed_total(self, client):
        plan = client.post("/api/installments", json=self.PLAN).json()

        response = client.put(f"/api/installments/{plan['id']}", json={"paidMonths": 13})

        assert response.status_code == 400

    def test_update_and_delete_can_be_disabled(self, client, settings):
        plan = client.post("/api/installments", json=self.PLAN).json()
        settings.allow_installment_updates = False

        assert client.put(f"/api/installments/{plan['id']}", json={"paidMonths": 1}).status_code == 405
        assert client.delete(f"/api/installments/{plan['id']}").status_code == 405
        assert len(client.get("/api/installments").json()) == 1
