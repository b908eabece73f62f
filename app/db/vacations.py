"""Vacation record store.

``VacationStore`` is the interface the pipeline consumes; the Supabase
implementation maps it onto the ``vacations`` table.  Every Supabase failure
is re-raised as ``StoreError`` so callers see a single failure channel.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import StoreError
from app.db.supabase import get_supabase
from app.models.vacation import VacationCreate, VacationRecord

logger = logging.getLogger(__name__)


def _to_record(row: dict[str, Any]) -> VacationRecord:
    try:
        return VacationRecord(**row)
    except (TypeError, ValidationError) as exc:
        raise StoreError(f"Unexpected row shape: {exc}") from exc


class VacationStore(Protocol):
    """Generic record store for vacations."""

    def find_one(
        self, employee_id: str, start_date: str | None = None
    ) -> VacationRecord | None: ...

    def delete(
        self, *, employee_id: str | None = None, record_id: str | None = None
    ) -> None: ...

    def insert(self, record: VacationCreate) -> VacationRecord: ...

    def list_all(self) -> list[VacationRecord]: ...


class SupabaseVacationStore:
    """``VacationStore`` backed by a Supabase table."""

    def __init__(self, client: Any, table: str | None = None) -> None:
        self._client = client
        self._table = table or settings.VACATIONS_TABLE

    def _query(self) -> Any:
        return self._client.table(self._table)

    def find_one(
        self, employee_id: str, start_date: str | None = None
    ) -> VacationRecord | None:
        """Return the first record for *employee_id* (and *start_date*)."""
        try:
            query = self._query().select("*").eq("employee_id", employee_id)
            if start_date is not None:
                query = query.eq("start_date", start_date)
            result = query.limit(1).execute()
        except Exception as exc:
            raise StoreError(f"Lookup failed: {exc}") from exc

        if not result.data:
            return None
        return _to_record(result.data[0])

    def delete(
        self, *, employee_id: str | None = None, record_id: str | None = None
    ) -> None:
        """Hard-delete by record id, or every record of an employee."""
        if (employee_id is None) == (record_id is None):
            raise ValueError("Exactly one of employee_id or record_id is required")

        column, value = (
            ("id", record_id) if record_id is not None else ("employee_id", employee_id)
        )
        try:
            self._query().delete().eq(column, value).execute()
        except Exception as exc:
            raise StoreError(f"Delete failed: {exc}") from exc

    def insert(self, record: VacationCreate) -> VacationRecord:
        """Insert *record* and return it with store-assigned fields."""
        try:
            result = (
                self._query()
                .insert(record.model_dump(mode="json", exclude_none=True))
                .execute()
            )
        except Exception as exc:
            raise StoreError(f"Insert failed: {exc}") from exc

        if not result.data:
            raise StoreError("Insert returned no data")
        return _to_record(result.data[0])

    def list_all(self) -> list[VacationRecord]:
        """Return every record ordered by ``start_date`` ascending."""
        try:
            result = (
                self._query()
                .select("*")
                .order("start_date", desc=False)
                .execute()
            )
        except Exception as exc:
            raise StoreError(f"List failed: {exc}") from exc

        return [_to_record(row) for row in (result.data or [])]


def get_vacation_store() -> VacationStore:
    """FastAPI dependency returning the process-wide store.

    Raises ``StoreUnavailable`` when Supabase is not configured.
    """
    return SupabaseVacationStore(get_supabase())
