"""Row converters: every ORM → record construction in one place."""

from datetime import datetime, timezone

from .models import Conversation, Message, Sender
from .records import ConversationSummary, StoredConversation, StoredMessage


def as_utc(value: datetime) -> datetime:
    # SQLite drops the offset on round-trip; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def conversation_from_row(row: Conversation) -> StoredConversation:
    return StoredConversation(
        id=row.id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def summary_from_row(row: Conversation, message_count: int) -> ConversationSummary:
    return ConversationSummary(
        id=row.id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        message_count=message_count,
    )


def message_from_row(row: Message) -> StoredMessage:
    return StoredMessage(
        id=row.message_id,
        conversation_id=row.conversation_id,
        sender=Sender(row.sender),
        text=row.text,
        created_at=as_utc(row.created_at),
        seq=row.seq,
    )
