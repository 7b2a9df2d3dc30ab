"""
Tests for the completion client backends.

YandexGPTClient is exercised over httpx.MockTransport; GeminiClient with a
mocked google-genai client. No network calls are made.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from planter.schemas.chat import CompletionMessage
from planter.services import completion_client as completion_module
from planter.services.completion_client import GeminiClient, YandexGPTClient
from planter.utils.exceptions import EmptyResponseError, ExternalServiceError


def _ok_body(text: str = "1. 1. Монстера - 0.9") -> dict:
    return {
        "result": {
            "alternatives": [
                {"message": {"role": "assistant", "text": text}, "status": "ALTERNATIVE_STATUS_FINAL"}
            ]
        }
    }


def _client(handler) -> YandexGPTClient:
    return YandexGPTClient(
        api_key="test-key",
        model_uri="gpt://folder/yandexgpt",
        url="https://completion.test/v1/completion",
        transport=httpx.MockTransport(handler),
    )


# =============================================================================
# YANDEX GPT (HTTP JSON)
# =============================================================================

class TestYandexGPTClient:
    """Tests for the HTTP completion backend."""

    @pytest.mark.asyncio
    async def test_prompt_mode_sends_single_user_message(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json=_ok_body("ответ"))

        text = await _client(handler).complete("подбери растение")

        request = captured["request"]
        body = json.loads(request.content)
        assert text == "ответ"
        assert request.method == "POST"
        assert str(request.url) == "https://completion.test/v1/completion"
        assert request.headers["Authorization"] == "Api-Key test-key"
        assert body == {
            "modelUri": "gpt://folder/yandexgpt",
            "completionOptions": {"temperature": 0.7, "maxTokens": 2000},
            "messages": [{"role": "user", "text": "подбери растение"}],
        }

    @pytest.mark.asyncio
    async def test_history_mode_sends_messages_in_order(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_ok_body())

        history = [
            CompletionMessage(role="system", text="директива"),
            CompletionMessage(role="user", text="вопрос"),
            CompletionMessage(role="assistant", text="ответ"),
            CompletionMessage(role="user", text="ещё вопрос"),
        ]

        await _client(handler).complete(history)

        assert [m["role"] for m in captured["body"]["messages"]] == ["system", "user", "assistant", "user"]
        assert captured["body"]["messages"][-1]["text"] == "ещё вопрос"

    @pytest.mark.asyncio
    async def test_returns_first_alternative_verbatim(self):
        body = _ok_body("  первый \n")
        body["result"]["alternatives"].append({"message": {"role": "assistant", "text": "второй"}})

        text = await _client(lambda request: httpx.Response(200, json=body)).complete("x")

        assert text == "  первый \n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 401, 429, 500, 503])
    async def test_non_success_status_raises_external_service_error(self, status_code):
        client = _client(lambda request: httpx.Response(status_code, json={"error": "nope"}))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.complete("x")

        assert exc_info.value.upstream_status == status_code
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_timeout_raises_external_service_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ExternalServiceError) as exc_info:
            await _client(handler).complete("x")

        assert exc_info.value.upstream_status is None

    @pytest.mark.asyncio
    async def test_connection_error_raises_external_service_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ExternalServiceError):
            await _client(handler).complete("x")

    @pytest.mark.asyncio
    async def test_invalid_json_raises_external_service_error(self):
        client = _client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(ExternalServiceError):
            await client.complete("x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {},
        {"result": {}},
        {"result": {"alternatives": []}},
        {"result": {"alternatives": [{"message": {"role": "assistant"}}]}},
    ])
    async def test_missing_alternatives_raises_empty_response(self, body):
        client = _client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(EmptyResponseError):
            await client.complete("x")


# =============================================================================
# GEMINI (google-genai SDK)
# =============================================================================

@pytest.fixture
def sdk_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    return client


class TestGeminiClient:
    """Tests for the google-genai completion backend."""

    def test_build_request_maps_roles(self, sdk_client):
        gemini = GeminiClient(api_key="k", sdk_client=sdk_client)

        contents, config = gemini.build_request([
            CompletionMessage(role="system", text="директива"),
            CompletionMessage(role="user", text="вопрос"),
            CompletionMessage(role="assistant", text="ответ"),
        ])

        assert [c.role for c in contents] == ["user", "model"]
        assert config.system_instruction == "директива"
        assert config.temperature == 0.7
        assert config.max_output_tokens == 2000

    @pytest.mark.asyncio
    async def test_returns_response_text(self, sdk_client):
        response = MagicMock()
        response.candidates = [MagicMock()]
        response.text = "1. 1. Монстера - 0.9"
        sdk_client.aio.models.generate_content.return_value = response

        text = await GeminiClient(api_key="k", model="gemini-test", sdk_client=sdk_client).complete("prompt")

        assert text == "1. 1. Монстера - 0.9"
        call_kwargs = sdk_client.aio.models.generate_content.call_args.kwargs
        assert call_kwargs["model"] == "gemini-test"

    @pytest.mark.asyncio
    async def test_no_candidates_raises_empty_response(self, sdk_client):
        response = MagicMock()
        response.candidates = []
        sdk_client.aio.models.generate_content.return_value = response

        with pytest.raises(EmptyResponseError):
            await GeminiClient(api_key="k", sdk_client=sdk_client).complete("prompt")

    @pytest.mark.asyncio
    async def test_api_error_raises_external_service_error(self, sdk_client):
        sdk_client.aio.models.generate_content.side_effect = genai_errors.APIError(
            503, {"error": {"code": 503, "message": "unavailable", "status": "UNAVAILABLE"}}
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiClient(api_key="k", sdk_client=sdk_client).complete("prompt")

        assert exc_info.value.upstream_status == 503

    @pytest.mark.asyncio
    async def test_timeout_raises_external_service_error(self, sdk_client):
        async def slow(**kwargs):
            await asyncio.sleep(1)

        sdk_client.aio.models.generate_content = slow

        with pytest.raises(ExternalServiceError):
            await GeminiClient(api_key="k", timeout=0.01, sdk_client=sdk_client).complete("prompt")

    @pytest.mark.asyncio
    async def test_connection_error_raises_external_service_error(self, sdk_client):
        sdk_client.aio.models.generate_content.side_effect = httpx.ConnectError(
            "All connection attempts failed"
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiClient(api_key="k", sdk_client=sdk_client).complete("prompt")

        assert exc_info.value.upstream_status is None


# =============================================================================
# FACTORY
# =============================================================================

class TestGetCompletionClient:
    """Tests for get_completion_client."""

    def test_returns_none_without_api_key(self):
        with patch.object(completion_module, "_completion_client", None), \
             patch.object(completion_module.settings, "completion_configured", return_value=False):
            assert completion_module.get_completion_client() is None

    def test_builds_yandex_client_by_default(self):
        with patch.object(completion_module, "_completion_client", None), \
             patch.object(completion_module.settings, "completion_configured", return_value=True), \
             patch.object(completion_module.settings, "COMPLETION_PROVIDER", "yandex"):
            client = completion_module.get_completion_client()

        assert isinstance(client, YandexGPTClient)
