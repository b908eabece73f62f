"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events (store handle
lifecycle), error handlers and router registration.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.core.logging import setup_logging
from app.db.supabase import close_supabase, is_supabase_configured
from app.routers import health, vacations, webhook

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks.

    The Supabase client is created lazily on first use and dropped on exit.
    """
    setup_logging()
    logger.info(
        "Application starting up",
        extra={"store_configured": is_supabase_configured()},
    )
    yield
    close_supabase()
    logger.info("Application shutting down")


app = FastAPI(
    title="Vacation Calendar API",
    description="Recognizes employee vacations in chat messages and keeps one calendar of them",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    """Answer 500 when a route needs the store and it is not configured.

    The webhook keeps its ``success`` envelope; listing routes answer with a
    bare ``error`` body.
    """
    logger.error(
        "store_unavailable",
        extra={"path": request.url.path, "error_message": str(exc)},
    )
    content: dict[str, object] = {"error": str(exc)}
    if request.url.path.startswith("/api/webhook"):
        content = {"success": False, **content}
    return JSONResponse(status_code=500, content=content)


# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(webhook.router, prefix="/api", tags=["Webhook"])
app.include_router(vacations.router, prefix="/api", tags=["Vacations"])
