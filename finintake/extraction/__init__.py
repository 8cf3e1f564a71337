from finintake.extraction.base import BaseExtractionClient
from finintake.extraction.config import ExtractionConfig
from finintake.extraction.extractor import ExtractionClient
from finintake.extraction.factory import ExtractionClientFactory

__all__ = [
    "BaseExtractionClient",
    "ExtractionClient",
    "ExtractionClientFactory",
    "ExtractionConfig",
]
