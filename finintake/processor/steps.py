from finintake.database.repositories.document_repository import FinancialDocumentRepository
from finintake.logging.logger import Log
from finintake.processor.pipeline import (
    ContentReader,
    PipelineContext,
    PipelineStep,
    VariantExtractor,
)


class AcquireContentStep(PipelineStep):
    name = "read-file"
    failure_prefix = "Failed to read uploaded file"

    def __init__(self, reader: ContentReader) -> None:
        self._reader = reader

    def run(self, context: PipelineContext) -> PipelineContext:
        context.content = self._reader.read(context.file_path)
        Log.info(f"Acquired content for document {context.document_id}", path=context.file_path)
        return context


class ExtractStep(PipelineStep):
    name = "extract-data-with-ai"

    def __init__(self, extractor: VariantExtractor) -> None:
        self._extractor = extractor

    def failure_message(self, exc: BaseException) -> str:
        return f"{self._extractor.failure_prefix}: {exc}"

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.content is None:
            raise ValueError("PipelineContext.content must be set before extraction")
        context.result = self._extractor.extract(context.content)
        Log.info(f"Extracted {context.result.media_kind} fields for document {context.document_id}")
        return context


class PersistOutcomeStep(PipelineStep):
    name = "update-database"

    def __init__(self, doc_repo: FinancialDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.result is None:
            raise ValueError("PipelineContext.result must be set before persist")
        self._doc_repo.mark_completed(context.document_id, context.result)
        Log.info(f"Document {context.document_id} marked as COMPLETED")
        return context


class MarkFailedStep(PipelineStep):
    name = "mark-failed"

    def __init__(self, doc_repo: FinancialDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._doc_repo.mark_failed(context.document_id, context.error_message)
        Log.error(
            f"Document {context.document_id} marked as FAILED: {context.error_message}",
            step=context.failed_step,
        )
        return context
