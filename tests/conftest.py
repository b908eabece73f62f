"""Shared test fixtures.

Provides an in-memory vacation store, a FastAPI ``test_client`` wired to it,
a mock LLM transport, and Supabase mock helpers for use across test modules.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.core.errors import StoreError
from app.models.vacation import VacationCreate, VacationRecord


class FakeVacationStore:
    """In-memory ``VacationStore`` with insertion-ordered records."""

    def __init__(self) -> None:
        self.records: list[VacationRecord] = []
        self.failing_employee_ids: set[str] = set()

    def find_one(
        self, employee_id: str, start_date: str | None = None
    ) -> VacationRecord | None:
        for record in self.records:
            if record.employee_id != employee_id:
                continue
            if start_date is not None and record.start_date != start_date:
                continue
            return record
        return None

    def delete(
        self, *, employee_id: str | None = None, record_id: str | None = None
    ) -> None:
        if record_id is not None:
            self.records = [r for r in self.records if r.id != record_id]
        else:
            self.records = [r for r in self.records if r.employee_id != employee_id]

    def insert(self, record: VacationCreate) -> VacationRecord:
        if record.employee_id in self.failing_employee_ids:
            raise StoreError(f"Insert failed for {record.employee_id}")
        stored = VacationRecord(
            id=str(uuid4()),
            created_at=datetime.now(timezone.utc),
            **record.model_dump(),
        )
        self.records.append(stored)
        return stored

    def list_all(self) -> list[VacationRecord]:
        return sorted(self.records, key=lambda r: r.start_date)

    def for_employee(self, employee_id: str) -> list[VacationRecord]:
        return [r for r in self.records if r.employee_id == employee_id]


@pytest.fixture()
def fake_store() -> FakeVacationStore:
    """Provide an empty in-memory store."""
    return FakeVacationStore()


@pytest.fixture()
def test_client(fake_store: FakeVacationStore) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient whose routes use ``fake_store``."""
    from app.db.vacations import get_vacation_store
    from app.main import app

    app.dependency_overrides[get_vacation_store] = lambda: fake_store
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@contextmanager
def mock_llm(
    content: Any = None,
    exc: Exception | None = None,
) -> Generator[AsyncMock, None, None]:
    """Patch ``httpx.AsyncClient`` so the oracle sees *content* or *exc*.

    Dicts are sent as JSON text; any other value is passed through as is.

    Yields the mocked client so tests can inspect ``post.call_args``.
    """
    if isinstance(content, dict):
        content = json.dumps(content, ensure_ascii=False)

    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.raise_for_status = MagicMock()
    mock_response.json.return_value = {"choices": [{"message": {"content": content}}]}

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        if exc is not None:
            mock_client.post = AsyncMock(side_effect=exc)
        else:
            mock_client.post = AsyncMock(return_value=mock_response)
        mock_client_class.return_value = mock_client
        yield mock_client


def chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent Supabase query chaining."""
    m = MagicMock()
    for method in ("select", "insert", "delete", "eq", "limit", "order"):
        getattr(m, method).return_value = m
    return m
