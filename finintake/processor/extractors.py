from finintake.extraction.base import BaseExtractionClient
from finintake.extraction.models import AudioFields, DocumentFields
from finintake.processor.models import AudioSource
from finintake.processor.pipeline import VariantExtractor


class DocumentFieldsExtractor(VariantExtractor):
    def __init__(self, client: BaseExtractionClient) -> None:
        self._client = client

    def extract(self, content: object) -> DocumentFields:
        if not isinstance(content, str):
            raise TypeError(f"Document extraction expects text, got {type(content).__name__}")
        return self._client.extract_document_fields(content)


class AudioFieldsExtractor(VariantExtractor):
    failure_prefix = "Failed to analyze audio"

    def __init__(self, client: BaseExtractionClient) -> None:
        self._client = client

    def extract(self, content: object) -> AudioFields:
        if not isinstance(content, AudioSource):
            raise TypeError(
                f"Audio analysis expects an AudioSource, got {type(content).__name__}"
            )
        return self._client.analyze_audio(content.path, content.mime_type)
