from abc import ABC, abstractmethod
from pathlib import Path

from finintake.extraction.models import AudioFields, DocumentFields


class BaseExtractionClient(ABC):
    """Contract for turning raw content into validated extraction results."""

    @abstractmethod
    def extract_document_fields(self, text: str) -> DocumentFields:
        """Extract structured financial data from document text.

        Raises:
            ExtractionError: on any failure.
        """

    @abstractmethod
    def analyze_audio(self, file_path: Path, mime_type: str) -> AudioFields:
        """Transcribe and analyze an audio recording.

        Args:
            file_path: Path to the recording. Read fully into memory.
            mime_type: Declared encoding of the recording. Not sniffed.

        Raises:
            ExtractionError: on any failure.
        """
