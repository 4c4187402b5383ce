import httpx
import openai

from app.vision.client_base import BaseVisionClient
from app.vision.exceptions import (
    VisionAuthError,
    VisionBadRequestError,
    VisionConnectionError,
    VisionEmptyResponseError,
    VisionError,
    VisionNotConfiguredError,
    VisionRateLimitError,
    VisionServerError,
    VisionTimeoutError,
)


class OpenAIVisionAdapter(BaseVisionClient):
    """Vision client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        # the SDK refuses an empty key, so no client is built until one is set
        self._client: openai.OpenAI | None = None
        if api_key:
            self._client = openai.OpenAI(
                api_key=api_key,
                timeout=timeout_seconds,
                base_url=base_url,
                max_retries=0,
            )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def create_vision_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        image_url: str,
    ) -> str:
        if self._client is None:
            raise VisionNotConfiguredError("Vision API key is empty")
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                        ],
                    }
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise VisionTimeoutError(f"AI provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise VisionConnectionError(f"AI provider network error: {exc}") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise VisionAuthError(f"AI provider rejected credentials: {exc}") from exc
        except openai.RateLimitError as exc:
            raise VisionRateLimitError(f"AI provider rate limit: {exc}") from exc
        except (openai.BadRequestError, openai.UnprocessableEntityError) as exc:
            raise VisionBadRequestError(f"AI provider rejected input: {exc}") from exc
        except openai.InternalServerError as exc:
            raise VisionServerError(f"AI provider server error: {exc}") from exc
        except openai.APIError as exc:
            raise VisionError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise VisionEmptyResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise VisionEmptyResponseError("AI returned empty response")
        return content
