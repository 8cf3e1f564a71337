from typing import Any

import pytest

from finintake.database.models import EVENT_STATUS_PROCESSING, EventRecord
from finintake.dispatch.events import (
    AUDIO_UPLOADED,
    DOCUMENT_UPLOADED,
    UploadEvent,
    upload_payload,
)
from finintake.dispatch.exceptions import InvalidEventError


def _record(payload: Any, name: str = DOCUMENT_UPLOADED) -> EventRecord:
    return EventRecord(
        id=5, name=name, payload=payload, status=EVENT_STATUS_PROCESSING, attempts=2
    )


class TestUploadEvent:
    def test_reads_document_id_and_file_path(self) -> None:
        event = UploadEvent.from_record(_record(upload_payload("d1", "/tmp/invoice.txt")))

        assert event == UploadEvent(
            event_id=5,
            name=DOCUMENT_UPLOADED,
            document_id="d1",
            file_path="/tmp/invoice.txt",
            attempts=2,
        )

    def test_ignores_extra_payload_keys(self) -> None:
        payload = {"documentId": "d2", "filePath": "/tmp/call.wav", "uploadedBy": "u1"}

        event = UploadEvent.from_record(_record(payload, name=AUDIO_UPLOADED))

        assert event.name == AUDIO_UPLOADED
        assert event.document_id == "d2"

    @pytest.mark.parametrize(
        ("payload", "missing"),
        [
            ({"filePath": "/tmp/a.txt"}, "documentId"),
            ({"documentId": "d1"}, "filePath"),
            ({"documentId": "", "filePath": "/tmp/a.txt"}, "documentId"),
            ({"documentId": "d1", "filePath": 42}, "filePath"),
            (None, "documentId"),
        ],
    )
    def test_rejects_incomplete_payload(self, payload: Any, missing: str) -> None:
        with pytest.raises(InvalidEventError, match=missing):
            UploadEvent.from_record(_record(payload))


def test_upload_payload_shape() -> None:
    assert upload_payload("d1", "/tmp/a.txt") == {"documentId": "d1", "filePath": "/tmp/a.txt"}
