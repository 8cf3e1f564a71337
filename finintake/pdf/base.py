from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Turns the bytes of an uploaded PDF invoice into the text sent for extraction."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return page texts joined by newlines; blank pages are skipped.

        Raises:
            PdfExtractionError: when the PDF cannot be opened or read.
        """
