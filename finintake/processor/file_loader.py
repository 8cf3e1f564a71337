from pathlib import Path
from typing import ClassVar

from finintake.pdf.base import BasePdfExtractor
from finintake.processor.exceptions import SourceNotFoundError, SourceReadError
from finintake.processor.models import AudioSource
from finintake.processor.pipeline import ContentReader

_PDF_MAGIC = b"%PDF"


def ensure_exists(file_path: str) -> Path:
    """Return the upload path, or raise SourceNotFoundError naming it."""
    path = Path(file_path)
    if not path.is_file():
        raise SourceNotFoundError(f"File not found at path: {file_path}")
    return path


class TextContentReader(ContentReader):
    """Reads an uploaded document as UTF-8 text. PDF uploads go through the PDF extractor."""

    def __init__(self, pdf_extractor: BasePdfExtractor | None = None) -> None:
        self._pdf_extractor = pdf_extractor

    def read(self, file_path: str) -> str:
        path = ensure_exists(file_path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise SourceReadError(str(exc)) from exc

        if raw.startswith(_PDF_MAGIC) and self._pdf_extractor is not None:
            return self._pdf_extractor.extract(raw)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SourceReadError(f"{file_path} is not valid UTF-8: {exc}") from exc


class AudioContentReader(ContentReader):
    """Checks the recording exists and resolves its mime type from the extension."""

    MIME_TYPES: ClassVar[dict[str, str]] = {
        ".wav": "audio/wav",
        ".mp3": "audio/mp3",
    }
    DEFAULT_MIME_TYPE: ClassVar[str] = "audio/mp3"

    def read(self, file_path: str) -> AudioSource:
        path = ensure_exists(file_path)
        mime_type = self.MIME_TYPES.get(path.suffix.lower(), self.DEFAULT_MIME_TYPE)
        return AudioSource(path=path, mime_type=mime_type)
