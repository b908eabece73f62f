"""Reconciliation engine: validated record + store state -> store mutation.

One function, ``reconcile``, applies the conflict policy chosen by the entry
point.  Policies differ on purpose and are passed explicitly:

- ``replace_unconditional`` (webhook): one record per ``employee_id``; any
  existing record is deleted before the insert.
- ``dedup_on_start_date`` (bulk import): skip when a record with the same
  ``(employee_id, start_date)`` exists; otherwise insert, even if the employee
  already has other records.
- ``confirm_replace`` (manual single entry): on an ``(employee_id,
  start_date)`` match, ask ``confirm``; replace on yes, decline on no.
- ``always_insert`` (manual batch, seeding): no lookup at all.

Store failures propagate as ``StoreError``; they are never an outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from app.db.vacations import VacationStore
from app.models.enums import ReconciliationOutcome, ReconciliationPolicy
from app.models.vacation import VacationCreate, VacationRecord
from app.services.locks import employee_lock

logger = logging.getLogger(__name__)

ConfirmReplace = Callable[[VacationRecord], bool]


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of one submission.

    ``record`` is the stored record after the call: the new one for
    inserted/replaced, the existing one for duplicate_skipped/declined.
    ``previous`` is the record that was removed or kept in its place.
    """
    outcome: ReconciliationOutcome
    record: VacationRecord
    previous: VacationRecord | None = None


def _replace_unconditional(
    store: VacationStore, record: VacationCreate, confirm: ConfirmReplace | None
) -> ReconciliationResult:
    existing = store.find_one(record.employee_id)
    if existing is None:
        return ReconciliationResult(ReconciliationOutcome.inserted, store.insert(record))

    store.delete(employee_id=record.employee_id)
    return ReconciliationResult(
        ReconciliationOutcome.replaced, store.insert(record), previous=existing
    )


def _dedup_on_start_date(
    store: VacationStore, record: VacationCreate, confirm: ConfirmReplace | None
) -> ReconciliationResult:
    existing = store.find_one(record.employee_id, record.start_date)
    if existing is not None:
        return ReconciliationResult(
            ReconciliationOutcome.duplicate_skipped, existing, previous=existing
        )
    return ReconciliationResult(ReconciliationOutcome.inserted, store.insert(record))


def _confirm_replace(
    store: VacationStore, record: VacationCreate, confirm: ConfirmReplace | None
) -> ReconciliationResult:
    existing = store.find_one(record.employee_id, record.start_date)
    if existing is None:
        return ReconciliationResult(ReconciliationOutcome.inserted, store.insert(record))

    if confirm is None or not confirm(existing):
        return ReconciliationResult(
            ReconciliationOutcome.declined, existing, previous=existing
        )

    store.delete(record_id=existing.id)
    return ReconciliationResult(
        ReconciliationOutcome.replaced, store.insert(record), previous=existing
    )


def _always_insert(
    store: VacationStore, record: VacationCreate, confirm: ConfirmReplace | None
) -> ReconciliationResult:
    return ReconciliationResult(ReconciliationOutcome.inserted, store.insert(record))


_HANDLERS: dict[
    ReconciliationPolicy,
    Callable[[VacationStore, VacationCreate, ConfirmReplace | None], ReconciliationResult],
] = {
    ReconciliationPolicy.replace_unconditional: _replace_unconditional,
    ReconciliationPolicy.dedup_on_start_date: _dedup_on_start_date,
    ReconciliationPolicy.confirm_replace: _confirm_replace,
    ReconciliationPolicy.always_insert: _always_insert,
}


def reconcile(
    store: VacationStore,
    record: VacationCreate,
    policy: ReconciliationPolicy,
    *,
    confirm: ConfirmReplace | None = None,
) -> ReconciliationResult:
    """Submit *record* to *store* under *policy*.

    ``confirm`` is only consulted by ``confirm_replace``.  The whole
    lookup/delete/insert sequence runs under the employee's lock.
    """
    handler = _HANDLERS[policy]

    with employee_lock(record.employee_id):
        result = handler(store, record, confirm)

    logger.info(
        "reconciliation_completed",
        extra={
            "employee_id": record.employee_id,
            "start_date": record.start_date,
            "policy": policy.value,
            "outcome": result.outcome.value,
        },
    )
    return result
