"""LLM adapter: prompt assembly and failure translation.

``LLMAdapter.generate`` is the only entry point the orchestrator uses.  It
never raises for provider or transport failures; every failure category
becomes a fixed, user-safe reply and the real cause is logged.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from supportchat.configs.system import LLMConfig
from supportchat.core.history import HistoryMessage
from supportchat.core.metrics import (
    LLM_INPUT_TRUNCATIONS_TOTAL,
    LLM_LATENCY_SECONDS,
    LLM_REQUESTS_TOTAL,
)
from supportchat.infra.telemetry import (
    ATTR_HISTORY_MESSAGE_COUNT,
    ATTR_LLM_MODEL,
    ATTR_LLM_OUTCOME,
    ATTR_LLM_PROVIDER,
    ATTR_LLM_TRUNCATED,
    SPAN_LLM_GENERATE,
    tracer,
)

from .client import ChatCompletionClient, PromptMessage
from .errors import (
    LLMError,
    ProviderAuthError,
    ProviderRateLimited,
    ProviderTimeout,
    ProviderUnavailable,
)

logger = logging.getLogger(__name__)

TRUNCATION_SUFFIX = "... [message truncated]"

EMPTY_MESSAGE_REPLY = "I didn't receive a message. Could you please try again?"
RATE_LIMITED_REPLY = (
    "I'm receiving too many requests right now. "
    "Please wait a moment and try again."
)
AUTH_ERROR_REPLY = (
    "I'm having trouble connecting to the AI service. Please contact support."
)
TIMEOUT_REPLY = "The AI service is taking too long to respond. Please try again."
UNAVAILABLE_REPLY = (
    "I'm having trouble reaching the AI service. "
    "Please check your connection and try again."
)
GENERIC_ERROR_REPLY = (
    "I apologize, but I'm having trouble processing your request. "
    "Please try again later."
)

_FALLBACK_REPLIES: dict[type[LLMError], str] = {
    ProviderRateLimited: RATE_LIMITED_REPLY,
    ProviderAuthError: AUTH_ERROR_REPLY,
    ProviderTimeout: TIMEOUT_REPLY,
    ProviderUnavailable: UNAVAILABLE_REPLY,
}


def fallback_reply(exc: BaseException) -> str:
    """Map a failure to the user-facing text; unknown failures get the generic reply."""
    for exc_type, reply in _FALLBACK_REPLIES.items():
        if isinstance(exc, exc_type):
            return reply
    return GENERIC_ERROR_REPLY


def truncate_input(text: str, max_chars: int) -> tuple[str, bool]:
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_SUFFIX, True


class LLMAdapter:
    """Turns a history window plus a new message into reply text."""

    def __init__(
        self,
        client: ChatCompletionClient,
        config: LLMConfig,
        system_prompt: str,
    ) -> None:
        self._client = client
        self._config = config
        self._system_prompt = system_prompt

    @property
    def provider(self) -> str:
        return self._client.provider.value

    @property
    def model_name(self) -> str:
        return self._client.model_name

    def build_messages(
        self, history: Sequence[HistoryMessage], new_message: str
    ) -> list[PromptMessage]:
        """System prompt, then history oldest-first, then the new user turn."""
        messages: list[PromptMessage] = [
            {"role": "system", "content": self._system_prompt}
        ]
        messages.extend({"role": m.role, "content": m.content} for m in history)
        messages.append({"role": "user", "content": new_message})
        return messages

    async def generate(
        self, history: Sequence[HistoryMessage], new_message: str
    ) -> str:
        if not new_message or not new_message.strip():
            LLM_REQUESTS_TOTAL.labels(provider=self.provider, outcome="empty_input").inc()
            return EMPTY_MESSAGE_REPLY

        text, truncated = truncate_input(new_message, self._config.max_input_chars)
        if truncated:
            LLM_INPUT_TRUNCATIONS_TOTAL.inc()
            logger.info(
                "Truncated user message from %d to %d characters",
                len(new_message),
                self._config.max_input_chars,
            )

        with tracer.start_as_current_span(SPAN_LLM_GENERATE) as span:
            span.set_attribute(ATTR_LLM_PROVIDER, self.provider)
            span.set_attribute(ATTR_LLM_MODEL, self.model_name)
            span.set_attribute(ATTR_LLM_TRUNCATED, truncated)
            span.set_attribute(ATTR_HISTORY_MESSAGE_COUNT, len(history))

            outcome = "ok"
            started = time.perf_counter()
            try:
                reply = await self._client.complete(
                    self.build_messages(history, text)
                )
            except ProviderAuthError as exc:
                outcome = exc.outcome
                logger.error("LLM authentication failed: %s", exc)
                reply = fallback_reply(exc)
            except LLMError as exc:
                outcome = exc.outcome
                logger.warning("LLM call failed (%s): %s", outcome, exc)
                reply = fallback_reply(exc)
            except Exception as exc:
                outcome = "error"
                logger.exception("Unexpected error calling the LLM provider")
                reply = fallback_reply(exc)
            finally:
                LLM_LATENCY_SECONDS.labels(provider=self.provider).observe(
                    time.perf_counter() - started
                )

            span.set_attribute(ATTR_LLM_OUTCOME, outcome)
            LLM_REQUESTS_TOTAL.labels(provider=self.provider, outcome=outcome).inc()
            return reply
