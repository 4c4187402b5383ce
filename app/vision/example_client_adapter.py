"""Offline vision client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseVisionClient and register the provider in VisionExtractorFactory.
"""

import json
from typing import ClassVar

from app.vision.client_base import BaseVisionClient


class ExampleVisionAdapter(BaseVisionClient):
    """Returns a fixed title-block reply without any network calls.

    Useful for local development and as a template for real providers.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "drawingInfo": {
            "drawingNumber": "G0.00",
            "sheetTitle": "COVER SHEET",
            "discipline": "GENERAL",
        },
        "rawText": "EXAMPLE PROVIDER",
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    def create_vision_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        image_url: str,
    ) -> str:
        _ = model, temperature, max_tokens, prompt, image_url
        return f"Here is the extracted data:\n{json.dumps(self._response)}"
