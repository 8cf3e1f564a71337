from pathlib import Path

import pytest

from finintake.config.settings import Settings
from finintake.database.models import STATUS_COMPLETED, STATUS_FAILED, DocumentRecord
from finintake.database.repositories.document_repository import FinancialDocumentRepository
from finintake.processor.exceptions import SourceNotFoundError
from finintake.processor.processor import build_processors


def _example_settings() -> Settings:
    return Settings(extraction_provider="example")


@pytest.mark.integration
class TestProcessorIntegration:
    def test_document_job_completes(self, seed_document: DocumentRecord) -> None:
        document_job, _audio_job = build_processors(_example_settings())

        document_job.process(seed_document.id, seed_document.file_path)

        found = FinancialDocumentRepository().find_by_id(seed_document.id)
        assert found.status == STATUS_COMPLETED
        assert found.document_type == "Invoice"
        assert found.invoice_number == "EXAMPLE-1"
        assert found.processed_at is not None

    def test_audio_job_completes(self, seed_audio: DocumentRecord) -> None:
        _document_job, audio_job = build_processors(_example_settings())

        audio_job.process(seed_audio.id, seed_audio.file_path)

        found = FinancialDocumentRepository().find_by_id(seed_audio.id)
        assert found.status == STATUS_COMPLETED
        assert found.sentiment == "Neutral"
        assert found.speakers == ["Speaker 1"]
        assert found.transcript == "Transcript not available"

    def test_missing_file_marks_record_failed(
        self, seed_document: DocumentRecord, tmp_path: Path
    ) -> None:
        document_job, _audio_job = build_processors(_example_settings())
        missing = tmp_path / "gone.txt"

        with pytest.raises(SourceNotFoundError):
            document_job.process(seed_document.id, str(missing))

        found = FinancialDocumentRepository().find_by_id(seed_document.id)
        assert found.status == STATUS_FAILED
        assert found.processing_error is not None
        assert str(missing) in found.processing_error
