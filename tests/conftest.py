import io
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

INVOICE_TEXT = "Invoice #123, Total: $500"


@pytest.fixture()
def invoice_file(tmp_path: Path) -> Path:
    """Plain-text invoice upload."""
    path = tmp_path / "invoice.txt"
    path.write_text(INVOICE_TEXT, encoding="utf-8")
    return path


@pytest.fixture()
def audio_file(tmp_path: Path) -> Path:
    """A stand-in recording; content is never decoded locally."""
    path = tmp_path / "call.wav"
    path.write_bytes(b"RIFF\x24\x00\x00\x00WAVEfmt ")
    return path


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single-page PDF invoice with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Invoice #123")
    c.drawString(72, 700, "Total: 500.00 USD")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()
