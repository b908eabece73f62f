"""Enum types for reconciliation and extraction results."""

from enum import Enum


class ReconciliationPolicy(str, Enum):
    """Conflict policy applied when a record is submitted to the store."""
    replace_unconditional = "replace_unconditional"
    dedup_on_start_date = "dedup_on_start_date"
    confirm_replace = "confirm_replace"
    always_insert = "always_insert"


class ReconciliationOutcome(str, Enum):
    """What the reconciliation did with a submitted record."""
    inserted = "inserted"
    replaced = "replaced"
    duplicate_skipped = "duplicate_skipped"
    declined = "declined"


class OracleStatus(str, Enum):
    """Result class of a single extraction oracle call."""
    found = "found"
    no_vacation = "no_vacation"
    failed = "failed"
