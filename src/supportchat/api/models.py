"""Pydantic models for the HTTP API.

Bodies are camelCase on the wire (``conversationId``) and snake_case in
Python; ``populate_by_name`` accepts either on input.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from supportchat.core.service import ChatReply
from supportchat.infra.db import ConversationSummary, StoredConversation, StoredMessage

BLANK_MESSAGE_ERROR = "Message cannot be blank"
EMPTY_MESSAGE_ERROR = "Message cannot be empty"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    """Request body for ``POST /api/chat``."""

    conversation_id: str | None = Field(
        default=None, description="Existing conversation; omitted to start a new one"
    )
    message: str = Field(description="User message")

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("blank_message", BLANK_MESSAGE_ERROR)
        return value


class ChatResponse(CamelModel):
    """The stored AI reply."""

    conversation_id: str
    message_id: str
    message: str
    sender: Literal["ai"] = "ai"
    timestamp: datetime

    @classmethod
    def from_reply(cls, reply: ChatReply) -> "ChatResponse":
        return cls(
            conversation_id=reply.conversation_id,
            message_id=reply.message_id,
            message=reply.text,
            sender=reply.sender,
            timestamp=reply.timestamp,
        )


class SessionChatRequest(CamelModel):
    """Request body for ``POST /api/chat/message`` (session-keyed variant).

    ``message`` is optional here so a missing field gets the same 400 as an
    empty one.
    """

    message: str | None = Field(default=None, description="User message")
    session_id: str | None = Field(
        default=None, description="Existing conversation; omitted to start a new one"
    )


class SessionChatResponse(CamelModel):
    reply: str
    session_id: str


class ConversationResponse(CamelModel):
    id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: StoredConversation) -> "ConversationResponse":
        return cls(
            id=record.id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class ConversationSummaryResponse(ConversationResponse):
    message_count: int

    @classmethod
    def from_summary(
        cls, summary: ConversationSummary
    ) -> "ConversationSummaryResponse":
        return cls(
            id=summary.id,
            created_at=summary.created_at,
            updated_at=summary.updated_at,
            message_count=summary.message_count,
        )


class MessageResponse(CamelModel):
    id: str
    sender: Literal["user", "ai"]
    text: str
    timestamp: datetime

    @classmethod
    def from_record(cls, record: StoredMessage) -> "MessageResponse":
        return cls(
            id=record.id,
            sender=record.sender.value,
            text=record.text,
            timestamp=record.created_at,
        )


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str
