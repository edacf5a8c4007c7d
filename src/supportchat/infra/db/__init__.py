"""Async relational persistence (engine lifecycle, ORM models, store)."""

from .engine import (
    build_db,
    create_engine,
    create_schema,
    create_session_factory,
    get_message_store,
    get_session_factory,
)
from .models import Base, Conversation, Message, Sender
from .records import ConversationSummary, StoredConversation, StoredMessage
from .repository import MessageStore

__all__ = [
    "Base",
    "build_db",
    "Conversation",
    "ConversationSummary",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "get_message_store",
    "get_session_factory",
    "Message",
    "MessageStore",
    "Sender",
    "StoredConversation",
    "StoredMessage",
]
