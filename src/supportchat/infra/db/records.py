"""Immutable snapshots returned by ``MessageStore``.

ORM rows never leave the store; callers get these frozen models instead,
so nothing outside a session can trigger lazy loads or accidental writes.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .models import Sender


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class StoredConversation(_Record):
    id: str
    created_at: datetime
    updated_at: datetime


class ConversationSummary(StoredConversation):
    message_count: int


class StoredMessage(_Record):
    id: str
    conversation_id: str
    sender: Sender
    text: str
    created_at: datetime
    seq: int
