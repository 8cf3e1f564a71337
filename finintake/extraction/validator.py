"""Validates parsed AI responses against the target extraction shapes."""

from datetime import date, datetime
from typing import Any

from finintake.extraction.exceptions import ExtractionValidationError
from finintake.extraction.models import AUDIO_SENTIMENTS, AudioFields, DocumentFields, LineItem

_OPTIONAL_DOCUMENT_STRINGS = (
    ("invoiceNumber", "invoice_number"),
    ("vendorName", "vendor_name"),
    ("vendorAddress", "vendor_address"),
    ("clientName", "client_name"),
    ("clientAddress", "client_address"),
)
_OPTIONAL_DOCUMENT_NUMBERS = (
    ("subtotal", "subtotal"),
    ("taxAmount", "tax_amount"),
)
_OPTIONAL_DOCUMENT_DATES = (
    ("invoiceDate", "invoice_date"),
    ("dueDate", "due_date"),
)


def validate_document_fields(data: dict[str, Any]) -> DocumentFields:
    """Validate a parsed financial-document response and build DocumentFields.

    Raises:
        ExtractionValidationError: on any shape mismatch.
    """
    document_type = data.get("documentType")
    if not document_type or not isinstance(document_type, str):
        raise ExtractionValidationError("'documentType' must be a non-empty string")
    total_amount = _require_number(data.get("totalAmount"), "totalAmount")

    currency = data.get("currency")
    if currency is None:
        currency = "USD"
    elif not isinstance(currency, str):
        raise ExtractionValidationError("'currency' must be a string")

    optional: dict[str, Any] = {}
    for key, attr in _OPTIONAL_DOCUMENT_STRINGS:
        optional[attr] = _optional_string(data.get(key), key)
    for key, attr in _OPTIONAL_DOCUMENT_NUMBERS:
        optional[attr] = _optional_number(data.get(key), key)
    for key, attr in _OPTIONAL_DOCUMENT_DATES:
        optional[attr] = _optional_date(data.get(key), key)

    return DocumentFields(
        document_type=document_type,
        total_amount=total_amount,
        currency=currency,
        line_items=_build_line_items(data.get("lineItems")),
        **optional,
    )


def validate_audio_fields(data: dict[str, Any]) -> AudioFields:
    """Validate a parsed audio-analysis response and build AudioFields.

    Raises:
        ExtractionValidationError: on any shape mismatch.
    """
    sentiment = data.get("sentiment")
    if sentiment not in AUDIO_SENTIMENTS:
        raise ExtractionValidationError(
            f"'sentiment' must be one of {list(AUDIO_SENTIMENTS)}, got {sentiment!r}"
        )
    speakers = _string_list(data.get("speakers"), "speakers")
    topics = _string_list(data.get("topics"), "topics")
    transcript = _optional_string(data.get("transcript"), "transcript")
    return AudioFields(
        sentiment=sentiment,
        speakers=speakers,
        topics=topics,
        transcript=transcript,
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_number(raw: Any, name: str) -> float:
    if not _is_number(raw):
        raise ExtractionValidationError(f"'{name}' must be a number")
    return float(raw)


def _optional_number(raw: Any, name: str) -> float | None:
    if raw is None:
        return None
    return _require_number(raw, name)


def _optional_string(raw: Any, name: str) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ExtractionValidationError(f"'{name}' must be a string or null")
    return raw


def _optional_date(raw: Any, name: str) -> date | None:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ExtractionValidationError(f"'{name}' must be an ISO date string or null")
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    timestamp = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(timestamp).date()
    except ValueError as exc:
        raise ExtractionValidationError(
            f"'{name}' must be an ISO date string, got {raw!r}"
        ) from exc


def _string_list(raw: Any, name: str) -> list[str]:
    if not isinstance(raw, list):
        raise ExtractionValidationError(f"'{name}' must be a list")
    for i, item in enumerate(raw):
        if not isinstance(item, str):
            raise ExtractionValidationError(f"'{name}' item at index {i} must be a string")
    return list(raw)


def _build_line_items(raw: Any) -> list[LineItem]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ExtractionValidationError("'lineItems' must be a list")
    return [_build_line_item(item, i) for i, item in enumerate(raw)]


def _build_line_item(raw: Any, index: int) -> LineItem:
    if not isinstance(raw, dict):
        raise ExtractionValidationError(f"Line item at index {index} must be an object")
    description = raw.get("description")
    if not isinstance(description, str):
        raise ExtractionValidationError(
            f"Line item at index {index}: 'description' must be a string"
        )
    return LineItem(
        description=description,
        quantity=_require_number(raw.get("quantity"), f"lineItems[{index}].quantity"),
        unit_price=_require_number(raw.get("unitPrice"), f"lineItems[{index}].unitPrice"),
        total_price=_require_number(raw.get("totalPrice"), f"lineItems[{index}].totalPrice"),
    )
