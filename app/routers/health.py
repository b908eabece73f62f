"""Health check endpoint.

Returns service status including store connectivity and whether the
extraction oracle has credentials.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.db.supabase import get_supabase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return health status including a real Supabase connectivity test.

    Returns 200 OK when healthy, 503 when the store is down or not configured.
    """
    db_status = "disconnected"

    try:
        client = get_supabase()
        result = client.table(settings.VACATIONS_TABLE).select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except StoreUnavailable:
        db_status = "not_configured"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "oracle": "configured" if settings.LLM_API_KEY else "not_configured",
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
