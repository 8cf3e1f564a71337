import io

import pdfplumber

from finintake.pdf.base import BasePdfExtractor
from finintake.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts invoice text from PDF using pdfplumber, tables included as text."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text(layout=False) or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return "\n".join(page.strip() for page in pages if page.strip())
