"""Conversation orchestration: the inbound-message flow.

``send_message`` persists the user turn, builds a bounded history window,
asks the LLM adapter for a reply and persists that too.  The user turn is
committed before the provider is called and no session is held across the
call, so a slow provider never pins a database connection.
"""

from __future__ import annotations

import logging

from supportchat.configs.system import ChatConfig
from supportchat.core.errors import MessageValidationError
from supportchat.core.history import window_history
from supportchat.core.llm.adapter import LLMAdapter
from supportchat.infra.db import (
    ConversationSummary,
    MessageStore,
    Sender,
    StoredConversation,
    StoredMessage,
)
from supportchat.infra.telemetry import ATTR_CONVERSATION_ID, SPAN_CHAT_SEND, tracer

from .models import ChatReply

logger = logging.getLogger(__name__)

BLANK_MESSAGE_ERROR = "Message cannot be blank"


class ConversationService:
    """Chat flow plus thin conversation management for the HTTP layer."""

    def __init__(
        self,
        store: MessageStore,
        adapter: LLMAdapter,
        config: ChatConfig,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._config = config

    def normalize_message(self, text: str | None) -> str:
        """Reject blank input and truncate to ``max_message_length``."""
        if text is None or not text.strip():
            raise MessageValidationError(BLANK_MESSAGE_ERROR)
        limit = self._config.max_message_length
        if len(text) > limit:
            logger.info("Inbound message truncated from %d to %d characters", len(text), limit)
            return text[:limit]
        return text

    async def send_message(
        self, conversation_id: str | None, text: str | None
    ) -> ChatReply:
        message = self.normalize_message(text)

        with tracer.start_as_current_span(SPAN_CHAT_SEND) as span:
            if conversation_id:
                conversation = await self._store.get_conversation(conversation_id)
            else:
                conversation = await self._store.create_conversation()
            span.set_attribute(ATTR_CONVERSATION_ID, conversation.id)

            user_message = await self._store.append_message(
                conversation.id, Sender.USER, message
            )

            max_history = self._config.max_history
            recent = await self._store.recent_messages(
                conversation.id, max_history + 1
            )
            history = window_history(
                (m for m in recent if m.id != user_message.id), max_history
            )

            reply_text = await self._adapter.generate(history, message)

            ai_message = await self._store.append_message(
                conversation.id, Sender.AI, reply_text
            )
            logger.info(
                "Replied in conversation %s with %d history messages",
                conversation.id,
                len(history),
            )
            return ChatReply(
                conversation_id=conversation.id,
                message_id=ai_message.id,
                text=ai_message.text,
                timestamp=ai_message.created_at,
            )

    async def create_conversation(self) -> StoredConversation:
        return await self._store.create_conversation()

    async def get_conversation(self, conversation_id: str) -> StoredConversation:
        return await self._store.get_conversation(conversation_id)

    async def list_conversations(self, limit: int) -> list[ConversationSummary]:
        return await self._store.list_conversations(limit)

    async def list_messages(self, conversation_id: str) -> list[StoredMessage]:
        return await self._store.list_messages(conversation_id)

    async def delete_conversation(self, conversation_id: str) -> None:
        await self._store.delete_conversation(conversation_id)
