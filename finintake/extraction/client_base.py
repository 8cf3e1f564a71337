from abc import ABC, abstractmethod

from finintake.extraction.models import InlineAttachment


class BaseCompletionClient(ABC):
    """Contract for provider-specific generative AI clients."""

    @abstractmethod
    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        attachment: InlineAttachment | None = None,
    ) -> str:
        """Return provider response as plain text.

        Raises:
            ExtractionNetworkError: on transport or provider API failures.
            ExtractionError: when the provider returns no content.
        """
