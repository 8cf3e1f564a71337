from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar

AUDIO_SENTIMENTS = ("Positive", "Neutral", "Negative")
TRANSCRIPT_NOT_AVAILABLE = "Transcript not available"


@dataclass(frozen=True)
class InlineAttachment:
    """Binary content sent inline with a prompt (base64 payload)."""

    mime_type: str
    data_base64: str


@dataclass(frozen=True)
class LineItem:
    """A single invoice line. Order within a document is significant."""

    description: str
    quantity: float
    unit_price: float
    total_price: float


@dataclass(frozen=True)
class DocumentFields:
    """Structured data extracted from an invoice, receipt or bill."""

    media_kind: ClassVar[str] = "document"

    document_type: str
    total_amount: float
    currency: str = "USD"
    invoice_number: str | None = None
    invoice_date: date | None = None
    due_date: date | None = None
    vendor_name: str | None = None
    vendor_address: str | None = None
    client_name: str | None = None
    client_address: str | None = None
    subtotal: float | None = None
    tax_amount: float | None = None
    line_items: list[LineItem] = field(default_factory=list)

    def as_columns(self) -> dict[str, Any]:
        """Column values for the financial_documents table."""
        return {
            "document_type": self.document_type,
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date,
            "due_date": self.due_date,
            "vendor_name": self.vendor_name,
            "vendor_address": self.vendor_address,
            "client_name": self.client_name,
            "client_address": self.client_address,
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
            "currency": self.currency,
            "line_items": [
                {
                    "description": item.description,
                    "quantity": item.quantity,
                    "unitPrice": item.unit_price,
                    "totalPrice": item.total_price,
                }
                for item in self.line_items
            ],
        }


@dataclass(frozen=True)
class AudioFields:
    """Transcript and analysis of a recorded financial discussion."""

    media_kind: ClassVar[str] = "audio"

    sentiment: str
    speakers: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    transcript: str | None = None

    def as_columns(self) -> dict[str, Any]:
        """Column values for the financial_documents table."""
        return {
            "transcript": self.transcript or TRANSCRIPT_NOT_AVAILABLE,
            "sentiment": self.sentiment,
            "speakers": list(self.speakers),
            "topics": list(self.topics),
        }


ExtractionResult = DocumentFields | AudioFields
