from collections.abc import Sequence

from finintake.config.settings import Settings
from finintake.database.repositories.document_repository import FinancialDocumentRepository
from finintake.extraction.base import BaseExtractionClient
from finintake.extraction.config import ExtractionConfig
from finintake.extraction.factory import ExtractionClientFactory
from finintake.logging.logger import Log
from finintake.pdf.base import BasePdfExtractor
from finintake.pdf.factory import PdfExtractorFactory
from finintake.processor.extractors import AudioFieldsExtractor, DocumentFieldsExtractor
from finintake.processor.file_loader import AudioContentReader, TextContentReader
from finintake.processor.pipeline import PipelineContext, PipelineStep
from finintake.processor.steps import (
    AcquireContentStep,
    ExtractStep,
    MarkFailedStep,
    PersistOutcomeStep,
)


class Processor:
    """Runs one processing job: read -> extract -> persist, strictly in order.

    Any step failure is written to the record through the failure step and the
    original exception is re-raised for the caller to log or retry. The job itself
    never retries.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        failed_step: PipelineStep,
        name: str = "document",
    ) -> None:
        self._steps = list(steps)
        self._failed_step = failed_step
        self.name = name

    def process(self, document_id: str, file_path: str) -> PipelineContext:
        """Run all steps for a document and return the final context."""
        Log.info(f"Processing {self.name} job for document {document_id}", path=file_path)
        context = PipelineContext(document_id=document_id, file_path=file_path)
        for step in self._steps:
            try:
                context = step.run(context)
            except Exception as exc:
                context.error_message = step.failure_message(exc)
                context.failed_step = step.name
                Log.error(f"Step {step.name} failed for document {document_id}: {exc}")
                self._record_failure(context)
                raise
        Log.info(f"Finished {self.name} job for document {document_id}")
        return context

    def _record_failure(self, context: PipelineContext) -> None:
        # A failing failure write is logged and dropped; the caller still gets
        # the original error.
        try:
            self._failed_step.run(context)
        except Exception as exc:
            Log.error(
                f"Could not record failure for document {context.document_id}: {exc}",
                original_error=context.error_message,
            )


def build_document_job(
    extraction_client: BaseExtractionClient,
    doc_repo: FinancialDocumentRepository,
    pdf_extractor: BasePdfExtractor | None = None,
) -> Processor:
    """Document variant: UTF-8/PDF text -> financial fields."""
    return Processor(
        steps=[
            AcquireContentStep(TextContentReader(pdf_extractor)),
            ExtractStep(DocumentFieldsExtractor(extraction_client)),
            PersistOutcomeStep(doc_repo),
        ],
        failed_step=MarkFailedStep(doc_repo),
        name="document",
    )


def build_audio_job(
    extraction_client: BaseExtractionClient,
    doc_repo: FinancialDocumentRepository,
) -> Processor:
    """Audio variant: recording reference -> transcript and analysis."""
    return Processor(
        steps=[
            AcquireContentStep(AudioContentReader()),
            ExtractStep(AudioFieldsExtractor(extraction_client)),
            PersistOutcomeStep(doc_repo),
        ],
        failed_step=MarkFailedStep(doc_repo),
        name="audio",
    )


def build_processors(settings: Settings) -> tuple[Processor, Processor]:
    """Build the (document, audio) jobs with all required adapters.

    Raises:
        MissingCredentialError: if the extraction provider has no API key.
    """
    config = ExtractionConfig.from_settings(settings)
    extraction_client = ExtractionClientFactory.create(config)
    doc_repo = FinancialDocumentRepository()
    pdf_extractor = PdfExtractorFactory.create(settings)
    return (
        build_document_job(extraction_client, doc_repo, pdf_extractor),
        build_audio_job(extraction_client, doc_repo),
    )
