from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

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
from app.vision.openai_client_adapter import OpenAIVisionAdapter

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls: type[openai.APIStatusError], status: int) -> openai.APIStatusError:
    response = httpx.Response(status, request=_REQUEST)
    return cls("provider said no", response=response, body=None)


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _call(adapter: OpenAIVisionAdapter) -> str:
    return adapter.create_vision_completion(
        model="gpt-4o",
        temperature=0.1,
        max_tokens=1000,
        prompt="Extract the title block",
        image_url="data:image/png;base64,AAAA",
    )


def _adapter_with(mock_client: MagicMock, api_key: str = "k") -> OpenAIVisionAdapter:
    with patch(
        "app.vision.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIVisionAdapter(api_key=api_key, timeout_seconds=30)


class TestOpenAIVisionAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response('{"ok": true}')
        assert _call(_adapter_with(mock_client)) == '{"ok": true}'

    def test_sends_single_user_message_with_high_detail_image(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        _call(_adapter_with(mock_client))

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.1
        (message,) = kwargs["messages"]
        assert message["role"] == "user"
        text_part, image_part = message["content"]
        assert text_part == {"type": "text", "text": "Extract the title block"}
        assert image_part["image_url"]["detail"] == "high"

    def test_missing_api_key_raises_on_call(self) -> None:
        adapter = OpenAIVisionAdapter(api_key="", timeout_seconds=30)
        assert adapter.is_configured is False
        with pytest.raises(VisionNotConfiguredError) as exc_info:
            _call(adapter)
        assert exc_info.value.user_message == "OpenAI API key not configured"

    def test_missing_api_key_builds_no_sdk_client(self) -> None:
        with patch("app.vision.openai_client_adapter.openai.OpenAI") as mock_openai:
            OpenAIVisionAdapter(api_key="", timeout_seconds=30)
        mock_openai.assert_not_called()

    def test_configured_with_key(self) -> None:
        assert _adapter_with(MagicMock()).is_configured is True

    @pytest.mark.parametrize("content", [None, ""])
    def test_empty_content(self, content: str | None) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(content)
        with pytest.raises(VisionEmptyResponseError):
            _call(_adapter_with(mock_client))

    def test_no_choices(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(choices=[])
        with pytest.raises(VisionEmptyResponseError):
            _call(_adapter_with(mock_client))

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (openai.APITimeoutError(request=_REQUEST), VisionTimeoutError),
            (httpx.ReadTimeout("slow"), VisionTimeoutError),
            (openai.APIConnectionError(request=_REQUEST), VisionConnectionError),
            (httpx.ConnectError("refused"), VisionConnectionError),
            (_status_error(openai.AuthenticationError, 401), VisionAuthError),
            (_status_error(openai.PermissionDeniedError, 403), VisionAuthError),
            (_status_error(openai.RateLimitError, 429), VisionRateLimitError),
            (_status_error(openai.BadRequestError, 400), VisionBadRequestError),
            (_status_error(openai.UnprocessableEntityError, 422), VisionBadRequestError),
            (_status_error(openai.InternalServerError, 503), VisionServerError),
            (_status_error(openai.ConflictError, 409), VisionError),
        ],
    )
    def test_maps_provider_errors(self, error: Exception, expected: type[VisionError]) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = error
        with pytest.raises(expected) as exc_info:
            _call(_adapter_with(mock_client))
        assert type(exc_info.value) is expected
        assert exc_info.value.__cause__ is error

    def test_timeout_and_connection_messages_differ(self) -> None:
        assert VisionTimeoutError.user_message != VisionConnectionError.user_message
