"""Date/identity normalization for vacation candidates.

Turns an ``ExtractionCandidate`` (oracle output) or a ``ManualEntry``
(operator input) into a ``VacationCreate`` or raises a ``ValidationFailed``
subclass.  Dates are checked against the exact ``YYYY-MM-DD`` shape only;
ISO strings of that shape order correctly as plain strings, so range checks
compare them directly.
"""

from __future__ import annotations

import logging
import time

from app.core.config import settings
from app.core.constants import (
    BATCH_LINE_MIN_FIELDS,
    BATCH_LINE_SEPARATOR,
    DATE_PATTERN,
    MANUAL_ID_PREFIX,
)
from app.core.errors import IncompleteCandidate, InvalidDateFormat, ReversedDateRange
from app.models.vacation import ExtractionCandidate, ManualEntry, VacationCreate

logger = logging.getLogger(__name__)


def validate_date(value: str | None) -> str:
    """Return *value* trimmed if it matches ``YYYY-MM-DD``.

    Raises ``InvalidDateFormat`` otherwise.
    """
    if not isinstance(value, str):
        raise InvalidDateFormat(value)
    stripped = value.strip()
    if not DATE_PATTERN.fullmatch(stripped):
        raise InvalidDateFormat(value)
    return stripped


def synthesize_employee_id(suffix: int | str | None = None) -> str:
    """Build an id for an operator entry that came without one.

    ``manual_<epoch ms>`` plus ``_<suffix>`` when given.  Unique only as long
    as two calls do not land in the same millisecond with the same suffix.
    """
    employee_id = f"{MANUAL_ID_PREFIX}{int(time.time() * 1000)}"
    if suffix is not None:
        employee_id = f"{employee_id}_{suffix}"
    return employee_id


def _check_range(start_date: str, end_date: str) -> tuple[str, str]:
    if start_date <= end_date:
        return start_date, end_date
    if settings.SWAP_REVERSED_RANGES:
        logger.info(
            "reversed_range_swapped",
            extra={"start_date": start_date, "end_date": end_date},
        )
        return end_date, start_date
    raise ReversedDateRange(start_date, end_date)


def _build(
    employee_name: str | None,
    start_date: str | None,
    end_date: str | None,
    employee_id: str | None,
    message_text: str | None,
    id_suffix: int | str | None = None,
) -> VacationCreate:
    fields = {
        "employee_name": (employee_name or "").strip(),
        "start_date": (start_date or "").strip(),
        "end_date": (end_date or "").strip(),
    }
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise IncompleteCandidate(missing)

    start, end = _check_range(
        validate_date(fields["start_date"]),
        validate_date(fields["end_date"]),
    )

    return VacationCreate(
        employee_id=(employee_id or "").strip() or synthesize_employee_id(id_suffix),
        employee_name=fields["employee_name"],
        start_date=start,
        end_date=end,
        message_text=(message_text or "").strip() or None,
    )


def normalize_candidate(
    candidate: ExtractionCandidate,
    *,
    employee_id: str | None,
    message_text: str | None = None,
) -> VacationCreate:
    """Validate an oracle candidate for *employee_id*."""
    return _build(
        candidate.employee_name,
        candidate.start_date,
        candidate.end_date,
        employee_id,
        message_text,
    )


def normalize_manual_entry(
    entry: ManualEntry, id_suffix: int | str | None = None
) -> VacationCreate:
    """Validate operator-typed fields.

    A blank ``employee_id`` is replaced by a synthesized one.
    """
    return _build(
        entry.employee_name,
        entry.start_date,
        entry.end_date,
        entry.employee_id,
        entry.message_text,
        id_suffix,
    )


def parse_batch_line(line: str) -> ManualEntry:
    """Split ``name | id | start | end | comment`` into a ``ManualEntry``.

    The comment is optional; lines with fewer than four fields raise
    ``IncompleteCandidate``.  Fields beyond the fifth are ignored.
    """
    parts = [part.strip() for part in line.split(BATCH_LINE_SEPARATOR)]
    if len(parts) < BATCH_LINE_MIN_FIELDS:
        raise IncompleteCandidate(
            ["employee_name", "employee_id", "start_date", "end_date"][len(parts):]
        )

    employee_name, employee_id, start_date, end_date = parts[:4]
    message_text = parts[4] if len(parts) > 4 else None
    return ManualEntry(
        employee_name=employee_name,
        employee_id=employee_id,
        start_date=start_date,
        end_date=end_date,
        message_text=message_text or None,
    )
