"""Vacation listing endpoints consumed by the calendar UI.

GET /api/vacations -- every record ordered by start date.
DELETE /api/vacations/{record_id} -- operator hard delete.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response
from starlette.responses import JSONResponse

from app.core.errors import StoreError
from app.db.vacations import VacationStore, get_vacation_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/vacations", status_code=200)
async def list_vacations(
    store: VacationStore = Depends(get_vacation_store),
) -> Any:
    """Return all vacation records, earliest start first."""
    try:
        records = store.list_all()
    except StoreError as exc:
        logger.error("list_vacations_failed", extra={"error_message": str(exc)})
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return [record.model_dump(mode="json") for record in records]


@router.delete("/vacations/{record_id}", status_code=204)
async def delete_vacation(
    record_id: str,
    store: VacationStore = Depends(get_vacation_store),
) -> Response:
    """Delete one vacation record by id."""
    try:
        store.delete(record_id=record_id)
    except StoreError as exc:
        logger.error(
            "delete_vacation_failed",
            extra={"record_id": record_id, "error_message": str(exc)},
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    logger.info("vacation_deleted", extra={"record_id": record_id})
    return Response(status_code=204)
