from typing import Any, ClassVar

import httpx
import openai

from finintake.extraction.client_base import BaseCompletionClient
from finintake.extraction.exceptions import ExtractionError, ExtractionNetworkError
from finintake.extraction.models import InlineAttachment


class OpenAIClientAdapter(BaseCompletionClient):
    """AI client adapter built on the OpenAI-compatible chat completions API."""

    AUDIO_FORMATS: ClassVar[dict[str, str]] = {
        "audio/wav": "wav",
        "audio/x-wav": "wav",
        "audio/wave": "wav",
        "audio/mp3": "mp3",
        "audio/mpeg": "mp3",
    }

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        attachment: InlineAttachment | None = None,
    ) -> str:
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": self._user_content(user_prompt, attachment)})

        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=messages,  # type: ignore[arg-type]
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ExtractionError("AI returned empty response")
        return content

    def _user_content(
        self,
        user_prompt: str,
        attachment: InlineAttachment | None,
    ) -> str | list[dict[str, Any]]:
        if attachment is None:
            return user_prompt
        audio_format = self.AUDIO_FORMATS.get(attachment.mime_type.lower())
        if audio_format is None:
            raise ExtractionError(
                f"Unsupported attachment mime type '{attachment.mime_type}'"
            )
        return [
            {"type": "text", "text": user_prompt},
            {
                "type": "input_audio",
                "input_audio": {"data": attachment.data_base64, "format": audio_format},
            },
        ]
