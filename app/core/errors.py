"""Exception types shared across the ingestion pipeline."""


class VacationError(Exception):
    """Base class for all service errors."""


# ---------------------------------------------------------------------------
# Store failures: terminal for the current unit of work
# ---------------------------------------------------------------------------


class StoreError(VacationError):
    """A store operation failed."""


class StoreUnavailable(StoreError):
    """The store is not configured or cannot be reached."""


# ---------------------------------------------------------------------------
# Validation failures: callers drop the candidate
# ---------------------------------------------------------------------------


class ValidationFailed(VacationError):
    """A candidate cannot be turned into a persistable record."""


class InvalidDateFormat(ValidationFailed):
    """A date is not in ``YYYY-MM-DD`` form."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date format (expected YYYY-MM-DD): {value!r}")
        self.value = value


class IncompleteCandidate(ValidationFailed):
    """A required field is missing or empty."""

    def __init__(self, missing: list[str] | str) -> None:
        if isinstance(missing, str):
            missing = [missing]
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


class ReversedDateRange(ValidationFailed):
    """``start_date`` is after ``end_date``."""

    def __init__(self, start_date: str, end_date: str) -> None:
        super().__init__(f"start_date {start_date} is after end_date {end_date}")
        self.start_date = start_date
        self.end_date = end_date
