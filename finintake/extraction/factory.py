from typing import ClassVar

from finintake.extraction.config import ExtractionConfig
from finintake.extraction.example_client_adapter import ExampleClientAdapter
from finintake.extraction.extractor import ExtractionClient
from finintake.extraction.openai_client_adapter import OpenAIClientAdapter


class ExtractionClientFactory:
    """Creates the configured extraction client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "openrouter": "https://openrouter.ai/api/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, config: ExtractionConfig) -> ExtractionClient:
        """Create an extraction client from a validated config."""
        if config.provider == "example":
            return ExtractionClient(
                client=ExampleClientAdapter(),
                model="example",
            )
        client = OpenAIClientAdapter(
            api_key=config.api_key or "unused",
            timeout_seconds=config.timeout_seconds,
            base_url=cls._resolve_base_url(config),
        )
        return ExtractionClient(
            client=client,
            model=config.model,
            audio_model=config.audio_model,
            temperature=config.temperature,
        )

    @classmethod
    def _resolve_base_url(cls, config: ExtractionConfig) -> str | None:
        if config.base_url:
            return config.base_url
        if config.provider == "openai":
            return None
        if config.provider == "openai_compatible":
            raise ValueError(
                "extraction_base_url is required for extraction_provider=openai_compatible"
            )
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(config.provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown extraction provider '{config.provider}'. Choose from: {supported}"
        )
