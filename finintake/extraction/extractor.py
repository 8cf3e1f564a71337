"""AI-powered financial document and audio extraction."""

import base64
import json
import re
from pathlib import Path
from typing import Any

from finintake.extraction.base import BaseExtractionClient
from finintake.extraction.client_base import BaseCompletionClient
from finintake.extraction.exceptions import ExtractionError
from finintake.extraction.models import AudioFields, DocumentFields, InlineAttachment
from finintake.extraction.prompt_loader import load_json_shape, load_prompt_template
from finintake.extraction.validator import validate_audio_fields, validate_document_fields
from finintake.logging.logger import Log

_OPENING_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")


class ExtractionClient(BaseExtractionClient):
    """Builds prompts, calls the AI provider once and validates the JSON it returns."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        audio_model: str | None = None,
        temperature: float = 0.0,
        system_prompt: str = "",
        prompts_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._audio_model = audio_model or model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        self._document_template = load_prompt_template(
            "document", prompts_dir / "document_prompt.txt" if prompts_dir else None
        )
        self._document_shape = load_json_shape(
            "document", prompts_dir / "document_shape.json" if prompts_dir else None
        )
        self._audio_template = load_prompt_template(
            "audio", prompts_dir / "audio_prompt.txt" if prompts_dir else None
        )
        self._audio_shape = load_json_shape(
            "audio", prompts_dir / "audio_shape.json" if prompts_dir else None
        )

    def extract_document_fields(self, text: str) -> DocumentFields:
        if not text.strip():
            Log.warning("Submitting empty document text for extraction")
        prompt = self._document_template.format(
            json_shape=self._document_shape,
            document_text=text,
        )
        Log.debug(f"Document extraction prompt:\n{prompt}")

        raw_response = self._client.create_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        fields = validate_document_fields(self._parse_json(raw_response))
        Log.info(
            f"Document extraction complete: {fields.document_type}, "
            f"{len(fields.line_items)} line items"
        )
        return fields

    def analyze_audio(self, file_path: Path, mime_type: str) -> AudioFields:
        attachment = InlineAttachment(
            mime_type=mime_type,
            data_base64=self._read_base64(Path(file_path)),
        )
        prompt = self._audio_template.format(json_shape=self._audio_shape)
        Log.debug(f"Audio analysis prompt:\n{prompt}")

        raw_response = self._client.create_completion(
            model=self._audio_model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            attachment=attachment,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        fields = validate_audio_fields(self._parse_json(raw_response))
        Log.info(
            f"Audio analysis complete: {fields.sentiment}, "
            f"{len(fields.speakers)} speakers, {len(fields.topics)} topics"
        )
        return fields

    @staticmethod
    def _read_base64(path: Path) -> str:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ExtractionError(f"Failed to read audio file: {exc}") from exc
        return base64.b64encode(raw).decode("ascii")

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        cleaned = raw.strip()
        if not cleaned:
            raise ExtractionError("AI returned empty response")
        cleaned = _OPENING_FENCE.sub("", cleaned, count=1).removesuffix("```").strip()

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ExtractionError("JSON response must be an object")
        return parsed
