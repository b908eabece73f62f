"""HTTP tests for the webhook and vacation listing endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FakeVacationStore, mock_llm

from app.core.config import settings
from app.models.vacation import ExtractionCandidate

IVAN_REPLY = {"employee_name": "Ivan", "start_date": "2026-07-15", "end_date": "2026-07-25"}


def _body(text: str, author_id: str | int = "u1", name: str = "Ivan") -> dict:
    return {
        "message": {"text": text, "created_at": "2026-01-10T09:00:00Z"},
        "author": {"id": author_id, "name": name},
    }


class TestWebhookEndpoint:

    def test_vacation_recognized(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        with mock_llm(IVAN_REPLY):
            response = test_client.post("/api/webhook", json=_body("Уезжаю 15-25 июля"))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["vacation"] is True
        assert body["outcome"] == "inserted"
        assert body["data"] == {
            "employee_id": "u1",
            "employee_name": "Ivan",
            "start_date": "2026-07-15",
            "end_date": "2026-07-25",
        }
        assert len(fake_store.for_employee("u1")) == 1

    def test_resubmission_replaces(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        with mock_llm(IVAN_REPLY):
            test_client.post("/api/webhook", json=_body("Уезжаю 15-25 июля"))
        with mock_llm({**IVAN_REPLY, "end_date": "2026-07-30"}):
            response = test_client.post("/api/webhook", json=_body("Уезжаю 15-30 июля"))

        assert response.json()["outcome"] == "replaced"
        records = fake_store.for_employee("u1")
        assert len(records) == 1
        assert records[0].end_date == "2026-07-30"

    def test_integer_author_id(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        with mock_llm(IVAN_REPLY):
            response = test_client.post("/api/webhook", json=_body("Уезжаю 15-25 июля", author_id=77))

        assert response.json()["data"]["employee_id"] == "77"

    @pytest.mark.parametrize(
        "llm_kwargs",
        [
            {"content": {"vacation": None}},
            {"exc": httpx.ConnectError("down")},
            {"content": "{not json"},
            {"content": {"employee_name": "Ivan"}},
            {"content": 12345},
            {"content": ["not", "a", "string"]},
        ],
        ids=["sentinel", "transport-error", "malformed", "missing-fields", "number", "list"],
    )
    def test_no_vacation_responses_are_identical(
        self, test_client: TestClient, fake_store: FakeVacationStore, llm_kwargs: dict
    ) -> None:
        with mock_llm(**llm_kwargs):
            response = test_client.post("/api/webhook", json=_body("Привет всем!"))

        assert response.status_code == 200
        assert response.json() == {"success": True, "vacation": False}
        assert fake_store.records == []

    def test_store_failure_is_500(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        fake_store.failing_employee_ids.add("u1")

        with mock_llm(IVAN_REPLY):
            response = test_client.post("/api/webhook", json=_body("Уезжаю 15-25 июля"))

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "u1" in body["error"]

    def test_unexpected_error_is_500(self, test_client: TestClient) -> None:
        with patch(
            "app.routers.webhook.process_webhook",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = test_client.post("/api/webhook", json=_body("Уезжаю 15-25 июля"))

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal error"}

    def test_missing_author_is_422(self, test_client: TestClient) -> None:
        response = test_client.post("/api/webhook", json={"message": {"text": "hi"}})
        assert response.status_code == 422


class TestStoreNotConfigured:

    def test_webhook_reports_store_unavailable(self) -> None:
        import app.db.supabase as supa_mod
        from app.main import app

        supa_mod._client = None
        oracle = AsyncMock(return_value=ExtractionCandidate(**IVAN_REPLY))
        with (
            patch.object(settings, "SUPABASE_URL", ""),
            patch("app.services.ingestion.extract_vacation", new=oracle),
            TestClient(app) as client,
        ):
            response = client.post("/api/webhook", json=_body("Уезжаю 15-25 июля"))

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Supabase not configured"}
        oracle.assert_not_awaited()

    def test_list_reports_bare_error(self) -> None:
        import app.db.supabase as supa_mod
        from app.main import app

        supa_mod._client = None
        with (
            patch.object(settings, "SUPABASE_URL", ""),
            TestClient(app) as client,
        ):
            response = client.get("/api/vacations")

        assert response.status_code == 500
        assert response.json() == {"error": "Supabase not configured"}


class TestVacationsEndpoint:

    def test_list_ordered_by_start(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        for employee_id, start in (("a", "2026-09-01"), ("b", "2026-06-01"), ("c", "2026-07-10")):
            with patch(
                "app.services.ingestion.extract_vacation",
                new=AsyncMock(
                    return_value=ExtractionCandidate(
                        employee_name=employee_id, start_date=start, end_date="2026-12-31"
                    )
                ),
            ):
                test_client.post("/api/webhook", json=_body("Отпуск", author_id=employee_id))

        response = test_client.get("/api/vacations")

        assert response.status_code == 200
        assert [row["start_date"] for row in response.json()] == [
            "2026-06-01", "2026-07-10", "2026-09-01",
        ]

    def test_delete(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        with mock_llm(IVAN_REPLY):
            test_client.post("/api/webhook", json=_body("Уезжаю 15-25 июля"))
        record_id = fake_store.records[0].id

        response = test_client.delete(f"/api/vacations/{record_id}")

        assert response.status_code == 204
        assert fake_store.records == []

    def test_list_store_failure(self, test_client: TestClient, fake_store: FakeVacationStore) -> None:
        from app.core.errors import StoreError

        with patch.object(fake_store, "list_all", side_effect=StoreError("List failed: down")):
            response = test_client.get("/api/vacations")

        assert response.status_code == 500
        assert response.json() == {"error": "List failed: down"}
