from dataclasses import dataclass
from typing import Any

from finintake.database.models import EventRecord
from finintake.dispatch.exceptions import InvalidEventError

DOCUMENT_UPLOADED = "app/document.uploaded"
AUDIO_UPLOADED = "app/audio.uploaded"


@dataclass(frozen=True)
class UploadEvent:
    """An upload-completed event. Only documentId and filePath are read from the payload."""

    event_id: int
    name: str
    document_id: str
    file_path: str
    attempts: int = 0

    @classmethod
    def from_record(cls, record: EventRecord) -> "UploadEvent":
        """Build from an upload_events row.

        Raises:
            InvalidEventError: if documentId or filePath is missing or not a string.
        """
        payload: dict[str, Any] = record.payload if isinstance(record.payload, dict) else {}
        document_id = payload.get("documentId")
        file_path = payload.get("filePath")
        if not document_id or not isinstance(document_id, str):
            raise InvalidEventError(f"Event {record.id} has no documentId")
        if not file_path or not isinstance(file_path, str):
            raise InvalidEventError(f"Event {record.id} has no filePath")
        return cls(
            event_id=record.id,
            name=record.name,
            document_id=document_id,
            file_path=file_path,
            attempts=record.attempts,
        )


def upload_payload(document_id: str, file_path: str) -> dict[str, str]:
    """Payload published by the upload side for both event kinds."""
    return {"documentId": document_id, "filePath": file_path}
