"""
Completion Client - text generation boundary

Narrow ``complete()`` interface used by the recommendation orchestrator
(prompt mode) and the chat manager (history mode). Two interchangeable
backends:

- YandexGPTClient: one HTTP POST (httpx) with body
  ``{modelUri, completionOptions: {temperature, maxTokens}, messages: [{role, text}]}``
  and ``Authorization: Api-Key <key>``; answer read from
  ``result.alternatives[0].message.text``.
- GeminiClient: Google Gen AI SDK (google-genai), same contract.

Contract (both backends):
- non-2xx / transport failure / timeout -> ExternalServiceError (not retried here)
- no alternatives / no text             -> EmptyResponseError
- success                               -> first alternative's text, verbatim

Cancellation: the call is awaited inside the request task, so cancelling
that task aborts the outbound request.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from planter.config import settings
from planter.schemas.chat import CompletionMessage
from planter.utils.exceptions import EmptyResponseError, ExternalServiceError

logger = logging.getLogger(__name__)

PromptOrHistory = Union[str, Sequence[CompletionMessage]]

# Lazy module-level client (see get_completion_client)
_completion_client = None


def _as_messages(prompt_or_history: PromptOrHistory) -> List[CompletionMessage]:
    """Prompt mode wraps the text in a single user message; history mode passes through."""
    if isinstance(prompt_or_history, str):
        return [CompletionMessage(role="user", text=prompt_or_history)]
    return list(prompt_or_history)


class YandexGPTClient:
    """Completion backend speaking the Yandex Foundation Models JSON protocol."""

    def __init__(
        self,
        api_key: str,
        model_uri: str,
        url: str = "https://llm.api.cloud.yandex.net/foundationModels/v1/completion",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model_uri = model_uri
        self.url = url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    def build_request_body(self, messages: Sequence[CompletionMessage]) -> Dict[str, Any]:
        return {
            "modelUri": self.model_uri,
            "completionOptions": {
                "temperature": self.temperature,
                "maxTokens": self.max_tokens,
            },
            "messages": [{"role": m.role, "text": m.text} for m in messages],
        }

    async def complete(self, prompt_or_history: PromptOrHistory) -> str:
        """
        Send a prompt or a message history and return the generated text.

        Raises:
            ExternalServiceError: Non-2xx status, timeout, transport or body error
            EmptyResponseError: Response carried no alternatives
        """
        messages = _as_messages(prompt_or_history)
        body = self.build_request_body(messages)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Api-Key {self.api_key}",
        }

        logger.info(f"Calling completion API with {len(messages)} messages")

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            ) as client:
                response = await client.post(self.url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Completion API timed out after {self.timeout}s")
            raise ExternalServiceError(f"Completion API timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to send completion request: {e}")
            raise ExternalServiceError(f"Failed to send completion request: {e}") from e

        if not response.is_success:
            logger.error(f"Completion API returned status code {response.status_code}")
            raise ExternalServiceError(
                f"Completion API returned status code {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Failed to decode completion response body")
            raise ExternalServiceError(
                "Failed to decode completion response",
                upstream_status=response.status_code,
            ) from e

        result = data.get("result") if isinstance(data, dict) else None
        alternatives = result.get("alternatives") if isinstance(result, dict) else None
        if not alternatives or not isinstance(alternatives, list):
            logger.error("No alternatives in completion response")
            raise EmptyResponseError()

        first = alternatives[0] if isinstance(alternatives[0], dict) else {}
        message = first.get("message") if isinstance(first.get("message"), dict) else {}
        text = message.get("text")
        if not isinstance(text, str):
            logger.error("First alternative has no text")
            raise EmptyResponseError("First alternative in completion response has no text")

        return text


class GeminiClient:
    """Completion backend using the Google Gen AI SDK."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 30.0,
        sdk_client: Optional[genai.Client] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = sdk_client or genai.Client(api_key=api_key)

    def build_request(self, messages: Sequence[CompletionMessage]):
        """Split the system directive out and map roles to Gemini contents."""
        system_parts = [m.text for m in messages if m.role == "system"]
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.text)],
            )
            for m in messages
            if m.role != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction="\n".join(system_parts) if system_parts else None,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
        )
        return contents, config

    async def complete(self, prompt_or_history: PromptOrHistory) -> str:
        """Same contract as YandexGPTClient.complete."""
        contents, config = self.build_request(_as_messages(prompt_or_history))

        logger.info(f"Calling Gemini model {self.model} with {len(contents)} contents")

        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=contents,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini call timed out after {self.timeout}s")
            raise ExternalServiceError(f"Completion API timed out after {self.timeout}s") from e
        except genai_errors.APIError as e:
            logger.error(f"Gemini API returned status code {e.code}")
            raise ExternalServiceError(
                f"Completion API returned status code {e.code}",
                upstream_status=e.code,
            ) from e
        except httpx.HTTPError as e:
            # The SDK lets transport errors of its httpx client through
            logger.error(f"Failed to reach Gemini API: {e}")
            raise ExternalServiceError(f"Failed to send completion request: {e}") from e

        if not response.candidates:
            logger.error("Empty response from Gemini API")
            raise EmptyResponseError()

        text = response.text
        if not text:
            logger.error("Empty text in Gemini response")
            raise EmptyResponseError("First candidate in completion response has no text")

        return text


CompletionClient = Union[YandexGPTClient, GeminiClient]


def get_completion_client() -> Optional[CompletionClient]:
    """
    Lazy initialization of the configured completion backend.

    Returns None when the selected provider has no API key, which makes the
    recommendation flow use the local scorer only.
    """
    global _completion_client

    if _completion_client is not None:
        return _completion_client

    if not settings.completion_configured():
        logger.warning(
            f"Completion provider '{settings.COMPLETION_PROVIDER}' has no API key. "
            "Recommendations will use the local scorer and chat is unavailable."
        )
        return None

    if settings.COMPLETION_PROVIDER == "gemini":
        _completion_client = GeminiClient(
            api_key=settings.GOOGLE_API_KEY,
            model=settings.GEMINI_MODEL,
            temperature=settings.COMPLETION_TEMPERATURE,
            max_tokens=settings.COMPLETION_MAX_TOKENS,
            timeout=settings.COMPLETION_TIMEOUT_SECONDS,
        )
    else:
        _completion_client = YandexGPTClient(
            api_key=settings.YANDEX_GPT_API_KEY,
            model_uri=settings.YANDEX_GPT_MODEL,
            url=settings.YANDEX_GPT_URL,
            temperature=settings.COMPLETION_TEMPERATURE,
            max_tokens=settings.COMPLETION_MAX_TOKENS,
            timeout=settings.COMPLETION_TIMEOUT_SECONDS,
        )

    logger.info(f"Completion client initialized for provider '{settings.COMPLETION_PROVIDER}'")
    return _completion_client
