from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

STATUS_PROCESSING = "PROCESSING"
STATUS_COMPLETED = "COMPLETED"
STATUS_FAILED = "FAILED"

MEDIA_KIND_DOCUMENT = "document"
MEDIA_KIND_AUDIO = "audio"

EVENT_STATUS_PENDING = "pending"
EVENT_STATUS_PROCESSING = "processing"
EVENT_STATUS_DONE = "done"
EVENT_STATUS_FAILED = "failed"


@dataclass
class DocumentRecord:
    """Represents a row from the financial_documents table."""

    id: str
    file_name: str
    file_path: str
    media_kind: str
    status: str
    uploaded_at: datetime | None = None
    document_type: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    due_date: date | None = None
    vendor_name: str | None = None
    vendor_address: str | None = None
    client_name: str | None = None
    client_address: str | None = None
    subtotal: float | None = None
    tax_amount: float | None = None
    total_amount: float | None = None
    currency: str | None = None
    line_items: list[dict[str, Any]] = field(default_factory=list)
    transcript: str | None = None
    sentiment: str | None = None
    speakers: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    processing_error: str | None = None
    processed_at: datetime | None = None


@dataclass
class EventRecord:
    """Represents a row from the upload_events table."""

    id: int
    name: str
    payload: dict[str, Any]
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
