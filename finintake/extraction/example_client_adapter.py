"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in ExtractionClientFactory.
"""

import json
from typing import ClassVar

from finintake.extraction.client_base import BaseCompletionClient
from finintake.extraction.models import InlineAttachment


class ExampleClientAdapter(BaseCompletionClient):
    """Example adapter that returns fixed, valid extraction JSON.

    No network calls. Requests with an attachment get the audio-analysis shape,
    text-only requests get the financial-document shape.
    """

    DOCUMENT_RESPONSE: ClassVar[dict[str, object]] = {
        "documentType": "Invoice",
        "invoiceNumber": "EXAMPLE-1",
        "totalAmount": 0,
        "currency": "USD",
        "lineItems": [],
    }
    AUDIO_RESPONSE: ClassVar[dict[str, object]] = {
        "sentiment": "Neutral",
        "speakers": ["Speaker 1"],
        "topics": [],
        "transcript": "",
    }

    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        attachment: InlineAttachment | None = None,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt
        if attachment is not None:
            return json.dumps(self.AUDIO_RESPONSE)
        return json.dumps(self.DOCUMENT_RESPONSE)
