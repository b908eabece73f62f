"""Extraction oracle adapter: free-text message -> vacation candidate.

Sends one chat-completions request to an OpenAI-compatible LLM (DeepSeek by
default) using ``httpx`` and parses its JSON reply.  The adapter never raises:
transport errors, malformed replies and missing fields all collapse to "no
vacation" for the caller.  Internally the three cases (found / no vacation /
failed) are logged as distinct events so oracle degradation stays visible.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from app.core.config import settings
from app.core.constants import (
    NO_VACATION_KEY,
    REQUIRED_CANDIDATE_FIELDS,
    VACATION_SYSTEM_PROMPT_TEMPLATE,
)
from app.models.enums import OracleStatus
from app.models.vacation import ExtractionCandidate

logger = logging.getLogger(__name__)


class OracleReplyError(ValueError):
    """The oracle answered with something that is not a usable reply."""


def build_system_prompt(year: int | None = None) -> str:
    """Return the fixed instruction set for the configured default year."""
    return VACATION_SYSTEM_PROMPT_TEMPLATE.format(
        year=year if year is not None else settings.VACATION_DEFAULT_YEAR
    )


def build_user_message(text: str, author_name: str) -> str:
    return f"Сообщение: {text}\n\nАвтор: {author_name}"


def _strip_code_fences(content: str) -> str:
    clean = content.strip()
    if clean.startswith("```"):
        lines = [line for line in clean.split("\n") if not line.strip().startswith("```")]
        clean = "\n".join(lines)
    return clean


def parse_oracle_reply(
    content: Any, default_name: str | None = None
) -> ExtractionCandidate | None:
    """Parse the oracle's JSON reply.

    Returns ``None`` for the ``{"vacation": null}`` sentinel.  Raises
    ``OracleReplyError`` for non-text content, malformed JSON, a non-object
    reply or missing fields.  *default_name* fills an absent ``employee_name``.
    """
    if not isinstance(content, str):
        raise OracleReplyError(f"Reply content is not text: {type(content).__name__}")
    if not content.strip():
        raise OracleReplyError("Empty reply")

    try:
        parsed = json.loads(_strip_code_fences(content))
    except json.JSONDecodeError as exc:
        raise OracleReplyError(f"Reply is not JSON: {exc}") from exc

    if not isinstance(parsed, dict):
        raise OracleReplyError(f"Reply is not an object: {type(parsed).__name__}")

    if NO_VACATION_KEY in parsed and parsed[NO_VACATION_KEY] is None:
        return None

    if default_name and not parsed.get("employee_name"):
        parsed["employee_name"] = default_name

    missing = [
        field
        for field in REQUIRED_CANDIDATE_FIELDS
        if not isinstance(parsed.get(field), str) or not parsed[field].strip()
    ]
    if missing:
        raise OracleReplyError(f"Reply is missing fields: {', '.join(missing)}")

    return ExtractionCandidate(
        employee_name=parsed["employee_name"].strip(),
        start_date=parsed["start_date"].strip(),
        end_date=parsed["end_date"].strip(),
    )


async def _request_completion(text: str, author_name: str) -> Any:
    """Issue the single chat-completions call and return the reply content."""
    api_url = f"{settings.LLM_BASE_URL.rstrip('/')}/chat/completions"

    async with httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS) as client:
        response = await client.post(
            api_url,
            headers={
                "Authorization": f"Bearer {settings.LLM_API_KEY}",
                "Content-Type": "application/json",
            },
            json={
                "model": settings.LLM_MODEL,
                "messages": [
                    {"role": "system", "content": build_system_prompt()},
                    {"role": "user", "content": build_user_message(text, author_name)},
                ],
                "temperature": 0,
                "max_tokens": settings.LLM_MAX_TOKENS,
                "response_format": {"type": "json_object"},
            },
        )
        response.raise_for_status()
        data: dict[str, Any] = response.json()
        return data["choices"][0]["message"]["content"]


async def classify_message(
    text: str | None,
    author_name: str,
    *,
    default_name: str | None = None,
) -> tuple[OracleStatus, ExtractionCandidate | None]:
    """Run the oracle and report what happened.

    Blank text is answered with ``no_vacation`` without calling the service.
    """
    if not text or not text.strip():
        return OracleStatus.no_vacation, None

    try:
        content = await _request_completion(text, author_name)
        candidate = parse_oracle_reply(content, default_name=default_name)
    except (httpx.HTTPError, OracleReplyError, KeyError, IndexError, TypeError, ValueError) as exc:
        logger.warning(
            "oracle_failure",
            extra={
                "author_name": author_name,
                "error_type": type(exc).__name__,
                "error_message": str(exc),
            },
        )
        return OracleStatus.failed, None

    if candidate is None:
        logger.info("oracle_no_vacation", extra={"author_name": author_name})
        return OracleStatus.no_vacation, None

    logger.info(
        "oracle_vacation_found",
        extra={
            "author_name": author_name,
            "start_date": candidate.start_date,
            "end_date": candidate.end_date,
        },
    )
    return OracleStatus.found, candidate


async def extract_vacation(
    text: str | None,
    author_name: str,
    *,
    default_name: str | None = None,
) -> ExtractionCandidate | None:
    """Return the vacation described in *text*, or ``None``.

    ``None`` covers both "no vacation mentioned" and "oracle failed".
    """
    _, candidate = await classify_message(text, author_name, default_name=default_name)
    return candidate
