from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from finintake.extraction.models import ExtractionResult


@dataclass(slots=True)
class PipelineContext:
    document_id: str
    file_path: str
    content: object | None = None
    result: ExtractionResult | None = None
    error_message: str = ""
    failed_step: str = ""


class PipelineStep(ABC):
    name: ClassVar[str] = "step"
    failure_prefix: ClassVar[str] = ""

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError

    def failure_message(self, exc: BaseException) -> str:
        """Human-readable message stored on the record when this step fails."""
        if self.failure_prefix:
            return f"{self.failure_prefix}: {exc}"
        return str(exc)


class ContentReader(ABC):
    """Turns an uploaded file path into the content an extractor consumes."""

    @abstractmethod
    def read(self, file_path: str) -> object:
        """Raises SourceNotFoundError when the file is missing."""


class VariantExtractor(ABC):
    """Produces the document or audio variant payload from acquired content."""

    failure_prefix: ClassVar[str] = "AI extraction failed"

    @abstractmethod
    def extract(self, content: object) -> ExtractionResult:
        """Raises ExtractionError on any failure."""
