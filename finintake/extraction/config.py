from dataclasses import dataclass
from typing import ClassVar

from finintake.config.settings import Settings
from finintake.extraction.exceptions import MissingCredentialError


@dataclass(frozen=True)
class ExtractionConfig:
    """Resolved provider configuration, validated once at startup."""

    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"example", "ollama"})

    provider: str
    api_key: str
    model: str
    audio_model: str
    base_url: str | None
    timeout_seconds: int
    temperature: float

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractionConfig":
        """Build the config and fail fast when the credential is missing.

        Raises:
            MissingCredentialError: if the provider requires a key and none is set.
        """
        provider = settings.extraction_provider.strip().lower()
        api_key = settings.extraction_api_key.strip()
        if not api_key and provider not in cls.KEYLESS_PROVIDERS:
            raise MissingCredentialError(
                f"EXTRACTION_API_KEY is required for extraction_provider={provider}"
            )
        return cls(
            provider=provider,
            api_key=api_key,
            model=settings.extraction_model_name,
            audio_model=settings.extraction_audio_model_name or settings.extraction_model_name,
            base_url=settings.extraction_base_url.strip() or None,
            timeout_seconds=settings.extraction_timeout_seconds,
            temperature=settings.extraction_temperature,
        )
