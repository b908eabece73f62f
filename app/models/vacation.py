"""Pydantic models for the ``vacations`` table and ingestion payloads.

``id`` and ``created_at`` are assigned by the store and are therefore
absent from the create model.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import ReconciliationOutcome


class VacationCreate(BaseModel):
    """Payload for inserting a vacation record."""
    employee_id: str
    employee_name: str
    start_date: str  # YYYY-MM-DD
    end_date: str  # YYYY-MM-DD
    message_text: str | None = None


class VacationRecord(BaseModel):
    """Full vacation record returned from the store."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    employee_name: str
    start_date: str
    end_date: str
    message_text: str | None = None
    created_at: datetime | None = None

    @field_validator("id", "employee_id", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class ExtractionCandidate(BaseModel):
    """Vacation fields extracted from text, not yet validated."""
    employee_name: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class ManualEntry(BaseModel):
    """Fields typed in by an operator."""
    employee_name: str = ""
    employee_id: str = ""
    start_date: str = ""
    end_date: str = ""
    message_text: str | None = None


# ---------------------------------------------------------------------------
# Webhook payload
# ---------------------------------------------------------------------------


class WebhookMessage(BaseModel):
    text: str = ""
    created_at: str | None = None


class WebhookAuthor(BaseModel):
    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class WebhookPayload(BaseModel):
    """Inbound chat webhook body."""
    message: WebhookMessage
    author: WebhookAuthor


class WebhookResult(BaseModel):
    """Outcome of processing one webhook message."""
    vacation: bool
    outcome: ReconciliationOutcome | None = None
    record: VacationRecord | None = None


# ---------------------------------------------------------------------------
# Chat export (bulk import)
# ---------------------------------------------------------------------------


class ExportUser(BaseModel):
    id: int | str
    name: str = ""
    last_name: str = ""
    email: str | None = None


class ExportChat(BaseModel):
    id: int | str
    name: str = ""


class ExportMessage(BaseModel):
    """One message from a chat export file."""
    id: int | str | None = None
    created_at: str | None = None
    content: str | None = None
    user: ExportUser
    chat: ExportChat | None = None

    @property
    def author_name(self) -> str:
        return f"{self.user.name} {self.user.last_name}".strip()


class IngestionReport(BaseModel):
    """Counters accumulated by a batch ingestion run."""
    imported: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.imported + self.skipped + self.failed
