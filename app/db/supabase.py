"""Supabase client singleton.

Provides ``get_supabase()`` which returns a lazily-initialized, process-wide
Supabase client using credentials from ``settings``, and ``close_supabase()``
which drops it on shutdown.
"""

import logging

from supabase import Client, create_client

from app.core.config import settings
from app.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_client: Client | None = None


def is_supabase_configured() -> bool:
    """Return True when a usable Supabase URL is set."""
    return settings.SUPABASE_URL.startswith("http")


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call.

    Raises ``StoreUnavailable`` if Supabase is not configured.
    """
    global _client
    if _client is None:
        if not is_supabase_configured():
            raise StoreUnavailable("Supabase not configured")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("supabase_client_created")
    return _client


def close_supabase() -> None:
    """Forget the singleton client so the next call creates a fresh one."""
    global _client
    if _client is not None:
        _client = None
        logger.info("supabase_client_closed")
