"""Chat webhook endpoint.

POST /api/webhook -- parses a vacation out of one chat message and stores it,
replacing any earlier vacation of the same author.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from app.core.errors import StoreError
from app.db.vacations import VacationStore, get_vacation_store
from app.models.vacation import WebhookPayload
from app.services.ingestion import process_webhook

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook", status_code=200)
async def receive_message(
    payload: WebhookPayload,
    store: VacationStore = Depends(get_vacation_store),
) -> Any:
    """Recognize and persist a vacation from an inbound message.

    Returns ``vacation: false`` for messages without a usable vacation and
    ``vacation: true`` with the stored fields otherwise.  Store failures
    answer 500 with ``success: false``.
    """
    try:
        result = await process_webhook(payload, store)
    except StoreError as exc:
        logger.error(
            "webhook_store_failed",
            extra={"employee_id": payload.author.id, "error_message": str(exc)},
        )
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})
    except Exception:
        logger.exception("webhook_unexpected_error")
        return JSONResponse(status_code=500, content={"success": False, "error": "Internal error"})

    if not result.vacation or result.record is None:
        return {"success": True, "vacation": False}

    return {
        "success": True,
        "vacation": True,
        "outcome": result.outcome.value if result.outcome else None,
        "data": {
            "employee_id": result.record.employee_id,
            "employee_name": result.record.employee_name,
            "start_date": result.record.start_date,
            "end_date": result.record.end_date,
        },
    }
