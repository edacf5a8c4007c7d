"""Provider clients: one ``ChatCompletionClient`` subclass per provider.

Groq and OpenAI speak the same OpenAI-compatible ``/chat/completions``
protocol and differ only in base URL and default model.  Gemini is
declared but not implemented.  Adding a provider means adding a subclass
and a ``_CLIENTS`` entry.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar, TypedDict

import httpx

from supportchat.configs.system import LLMConfig, LLMProvider

from .errors import (
    ProviderAuthError,
    ProviderHTTPError,
    ProviderRateLimited,
    ProviderTimeout,
    ProviderUnavailable,
    ResponseParseError,
    UnsupportedProvider,
)

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"
_AUTH_FAILURE_STATUSES = (401, 403)
_RATE_LIMITED_STATUS = 429


class PromptMessage(TypedDict):
    """One entry of the provider ``messages`` array."""

    role: str
    content: str


class ChatCompletionClient(ABC):
    """A provider that turns a list of prompt messages into reply text."""

    provider: ClassVar[LLMProvider]
    default_model: ClassVar[str]

    def __init__(self, config: LLMConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client

    @property
    def model_name(self) -> str:
        return self._config.model_name or self.default_model

    @abstractmethod
    async def complete(self, messages: Sequence[PromptMessage]) -> str:
        """Return the reply text or raise an ``LLMError`` subclass."""
        ...


class OpenAICompatibleClient(ChatCompletionClient):
    """Single POST to ``{base_url}/chat/completions`` with a bearer token."""

    default_base_url: ClassVar[str]

    @property
    def base_url(self) -> str:
        return (self._config.base_url or self.default_base_url).rstrip("/")

    def build_payload(self, messages: Sequence[PromptMessage]) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "messages": [dict(m) for m in messages],
        }

    async def complete(self, messages: Sequence[PromptMessage]) -> str:
        url = f"{self.base_url}{CHAT_COMPLETIONS_PATH}"
        headers = {"Authorization": f"Bearer {self._config.api_key}"}
        try:
            response = await self._http.post(
                url,
                json=self.build_payload(messages),
                headers=headers,
                timeout=self._config.timeout.total_seconds(),
            )
        except httpx.TimeoutException as exc:
            raise ProviderTimeout(f"{self.provider.value} timed out: {exc!r}") from exc
        except httpx.TransportError as exc:
            raise ProviderUnavailable(
                f"{self.provider.value} unreachable: {exc!r}"
            ) from exc

        if response.status_code == _RATE_LIMITED_STATUS:
            raise ProviderRateLimited(f"{self.provider.value} returned HTTP 429")
        if response.status_code in _AUTH_FAILURE_STATUSES:
            raise ProviderAuthError(
                f"{self.provider.value} rejected the credential "
                f"(HTTP {response.status_code})"
            )
        if response.is_error:
            raise ProviderHTTPError(response.status_code, response.text)

        return parse_chat_completion(response)


class GroqClient(OpenAICompatibleClient):
    provider = LLMProvider.GROQ
    default_base_url = "https://api.groq.com/openai/v1"
    default_model = "llama-3.1-8b-instant"


class OpenAIClient(OpenAICompatibleClient):
    provider = LLMProvider.OPENAI
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o-mini"


class GeminiClient(ChatCompletionClient):
    """Declared for configuration completeness; not implemented."""

    provider = LLMProvider.GEMINI
    default_model = "gemini-1.5-flash"

    async def complete(self, messages: Sequence[PromptMessage]) -> str:
        raise UnsupportedProvider("Gemini integration is not implemented")


def parse_chat_completion(response: httpx.Response) -> str:
    """Extract ``choices[0].message.content`` from an OpenAI-style body."""
    try:
        data = response.json()
    except ValueError as exc:
        raise ResponseParseError("Provider response is not JSON") from exc

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ResponseParseError(
            "Provider response has no choices[0].message.content"
        ) from exc

    if not isinstance(content, str) or not content.strip():
        raise ResponseParseError("Provider returned empty message content")
    return content


_CLIENTS: dict[LLMProvider, type[ChatCompletionClient]] = {
    LLMProvider.GROQ: GroqClient,
    LLMProvider.OPENAI: OpenAIClient,
    LLMProvider.GEMINI: GeminiClient,
}


def build_client(
    config: LLMConfig, http_client: httpx.AsyncClient
) -> ChatCompletionClient:
    """Instantiate the client for ``config.provider``."""
    try:
        client_cls = _CLIENTS[LLMProvider(config.provider)]
    except (KeyError, ValueError) as exc:
        raise UnsupportedProvider(f"Unknown LLM provider: {config.provider}") from exc
    if client_cls is GeminiClient:
        logger.warning("LLM provider 'gemini' is not implemented; replies will fall back")
    return client_cls(config, http_client)
