"""Ingestion pipeline for the three entry points.

- Live webhook: oracle -> normalizer -> ``replace_unconditional``.
- Bulk chat-export import: oracle -> normalizer -> ``dedup_on_start_date``,
  strictly sequential, partial failures counted and skipped.
- Manual entry: normalizer -> ``confirm_replace`` (single) or
  ``always_insert`` (batch lines).

Validation failures are treated as "no vacation" everywhere; store failures
are terminal for one unit of work (one request, one message, one line).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from app.core.constants import SEED_VACATIONS
from app.core.errors import StoreError, ValidationFailed
from app.db.vacations import VacationStore
from app.models.enums import ReconciliationOutcome, ReconciliationPolicy
from app.models.vacation import (
    ExportMessage,
    IngestionReport,
    ManualEntry,
    VacationCreate,
    WebhookPayload,
    WebhookResult,
)
from app.services.normalizer import (
    normalize_candidate,
    normalize_manual_entry,
    parse_batch_line,
)
from app.services.oracle import extract_vacation
from app.services.reconciliation import ConfirmReplace, ReconciliationResult, reconcile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Live webhook
# ---------------------------------------------------------------------------


async def process_webhook(payload: WebhookPayload, store: VacationStore) -> WebhookResult:
    """Handle one inbound chat message.

    Raises ``StoreError`` if the store fails; everything else resolves to a
    ``WebhookResult``.
    """
    text = payload.message.text
    candidate = await extract_vacation(text, payload.author.name)
    if candidate is None:
        return WebhookResult(vacation=False)

    try:
        record = normalize_candidate(
            candidate, employee_id=payload.author.id, message_text=text
        )
    except ValidationFailed as exc:
        logger.info(
            "webhook_candidate_rejected",
            extra={"employee_id": payload.author.id, "reason": str(exc)},
        )
        return WebhookResult(vacation=False)

    result = reconcile(store, record, ReconciliationPolicy.replace_unconditional)
    return WebhookResult(vacation=True, outcome=result.outcome, record=result.record)


# ---------------------------------------------------------------------------
# Bulk import from a chat export
# ---------------------------------------------------------------------------


def read_export_messages(directory: str | Path) -> list[ExportMessage]:
    """Read every ``*.json`` file in *directory* (sorted by name).

    Each file holds a JSON array of message objects.  Unreadable files and
    invalid items are logged and skipped.
    """
    path = Path(directory)
    if not path.is_dir():
        logger.error("export_directory_not_found", extra={"path": str(path)})
        return []

    files = sorted(path.glob("*.json"))
    logger.info("export_files_found", extra={"path": str(path), "file_count": len(files)})

    messages: list[ExportMessage] = []
    for file_path in files:
        try:
            items = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error(
                "export_file_unreadable",
                extra={"file": file_path.name, "error_message": str(exc)},
            )
            continue

        if not isinstance(items, list):
            logger.error("export_file_not_a_list", extra={"file": file_path.name})
            continue

        for index, item in enumerate(items):
            try:
                messages.append(ExportMessage.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "export_message_invalid",
                    extra={
                        "file": file_path.name,
                        "index": index,
                        "error_count": exc.error_count(),
                    },
                )

    return messages


async def import_message(message: ExportMessage, store: VacationStore) -> ReconciliationResult | None:
    """Run one historical message through the pipeline.

    Returns ``None`` when the message describes no usable vacation.
    Raises ``StoreError`` on store failure.
    """
    content = message.content
    if not content or not content.strip():
        return None

    author_name = message.author_name
    candidate = await extract_vacation(content, author_name, default_name=author_name)
    if candidate is None:
        return None

    employee_id = str(message.user.id)
    try:
        record = normalize_candidate(candidate, employee_id=employee_id, message_text=content)
    except ValidationFailed as exc:
        logger.info(
            "import_candidate_rejected",
            extra={"employee_id": employee_id, "reason": str(exc)},
        )
        return None

    return reconcile(store, record, ReconciliationPolicy.dedup_on_start_date)


async def import_messages(
    messages: Iterable[ExportMessage], store: VacationStore
) -> IngestionReport:
    """Import historical messages one at a time.

    Messages are processed strictly in order, so a later duplicate within the
    same batch is skipped relative to an earlier one.  Any failure on one
    message is counted as failed and the batch continues.
    """
    report = IngestionReport()

    for message in messages:
        try:
            result = await import_message(message, store)
        except StoreError as exc:
            report.failed += 1
            logger.error(
                "import_message_failed",
                extra={
                    "message_id": message.id,
                    "employee_id": str(message.user.id),
                    "error_message": str(exc),
                },
            )
            continue
        except Exception:
            report.failed += 1
            logger.exception(
                "import_message_crashed",
                extra={"message_id": message.id, "employee_id": str(message.user.id)},
            )
            continue

        if result is None:
            report.skipped += 1
        elif result.outcome is ReconciliationOutcome.duplicate_skipped:
            report.skipped += 1
            logger.info(
                "import_duplicate_skipped",
                extra={
                    "employee_id": result.record.employee_id,
                    "start_date": result.record.start_date,
                },
            )
        else:
            report.imported += 1

    logger.info(
        "import_completed",
        extra={
            "imported": report.imported,
            "skipped": report.skipped,
            "failed": report.failed,
        },
    )
    return report


# ---------------------------------------------------------------------------
# Manual entry
# ---------------------------------------------------------------------------


def add_manual_vacation(
    entry: ManualEntry,
    store: VacationStore,
    confirm: ConfirmReplace | None = None,
) -> ReconciliationResult:
    """Add one operator-typed vacation.

    If a record with the same ``(employee_id, start_date)`` exists, *confirm*
    decides whether it is replaced.  Raises ``ValidationFailed`` for bad input
    and ``StoreError`` on store failure.
    """
    record = normalize_manual_entry(entry)
    return reconcile(store, record, ReconciliationPolicy.confirm_replace, confirm=confirm)


def add_manual_batch(lines: Iterable[str], store: VacationStore) -> IngestionReport:
    """Insert one vacation per ``name | id | start | end | comment`` line.

    No lookup is made against existing records.  Blank lines are ignored;
    malformed lines, invalid dates and store failures count as failed.
    """
    report = IngestionReport()

    for line in lines:
        if not line.strip():
            continue
        try:
            record = normalize_manual_entry(parse_batch_line(line), id_suffix=report.imported)
            reconcile(store, record, ReconciliationPolicy.always_insert)
        except (ValidationFailed, StoreError) as exc:
            report.failed += 1
            logger.warning(
                "manual_line_failed",
                extra={"line": line, "error_message": str(exc)},
            )
            continue
        report.imported += 1

    logger.info(
        "manual_batch_completed",
        extra={"added": report.imported, "failed": report.failed},
    )
    return report


def seed_vacations(store: VacationStore) -> IngestionReport:
    """Insert the demo vacations, counting store failures."""
    report = IngestionReport()
    for row in SEED_VACATIONS:
        try:
            reconcile(store, VacationCreate(**row), ReconciliationPolicy.always_insert)
        except StoreError as exc:
            report.failed += 1
            logger.error(
                "seed_insert_failed",
                extra={"employee_id": row["employee_id"], "error_message": str(exc)},
            )
            continue
        report.imported += 1
    return report
