from finintake.config.settings import Settings
from finintake.pdf.base import BasePdfExtractor
from finintake.pdf.pdfplumber_adapter import PdfPlumberAdapter

DISABLED_ENGINES = frozenset({"", "none"})


class PdfExtractorFactory:
    """Picks the text extractor for PDF invoices.

    pdf_engine=none turns PDF conversion off; PDF uploads are then read as
    UTF-8 like any other document and fail the read step.
    """

    ENGINES: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor | None:
        engine = settings.pdf_engine.strip().lower()
        if engine in DISABLED_ENGINES:
            return None
        try:
            return cls.ENGINES[engine]()
        except KeyError:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Supported: {sorted(cls.ENGINES)} or 'none'"
            ) from None
