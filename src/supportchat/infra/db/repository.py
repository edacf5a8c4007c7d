"""Conversation and message persistence.

``MessageStore`` wraps the session factory; each public method runs in its
own transaction and returns frozen records (see ``records.py``).

Appends lock the owning conversation row (``SELECT ... FOR UPDATE``) so
concurrent writers to one conversation serialise on the message insert and
the ``updated_at`` bump, which commit together.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from supportchat.core.errors import ConversationNotFound
from supportchat.core.metrics import (
    CONVERSATIONS_CREATED_TOTAL,
    CONVERSATIONS_DELETED_TOTAL,
    MESSAGES_PERSISTED_TOTAL,
)
from supportchat.infra.id_utils import new_conversation_id, new_message_id
from supportchat.infra.telemetry import (
    ATTR_CONVERSATION_ID,
    ATTR_HISTORY_MESSAGE_COUNT,
    SPAN_HISTORY_LOAD,
    tracer,
)

from .converters import (
    as_utc,
    conversation_from_row,
    message_from_row,
    summary_from_row,
)
from .models import Conversation, Message, Sender, utcnow
from .records import ConversationSummary, StoredConversation, StoredMessage

logger = logging.getLogger(__name__)

DEFAULT_CONVERSATION_LIST_LIMIT = 50

_CHRONOLOGICAL = (Message.created_at.asc(), Message.seq.asc())
_NEWEST_FIRST = (Message.created_at.desc(), Message.seq.desc())


class MessageStore:
    """Async repository for conversations and their messages."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    async def create_conversation(self) -> StoredConversation:
        now = utcnow()
        row = Conversation(id=new_conversation_id(), created_at=now, updated_at=now)
        async with self._session_factory() as session, session.begin():
            session.add(row)
            await session.flush()
            record = conversation_from_row(row)
        CONVERSATIONS_CREATED_TOTAL.inc()
        logger.info("Created conversation %s", record.id)
        return record

    async def get_conversation(self, conversation_id: str) -> StoredConversation:
        async with self._session_factory() as session:
            row = await self._require_conversation(session, conversation_id)
            return conversation_from_row(row)

    async def list_conversations(
        self, limit: int = DEFAULT_CONVERSATION_LIST_LIMIT
    ) -> list[ConversationSummary]:
        """Most recently updated conversations first, with message counts."""
        message_count = func.count(Message.seq).label("message_count")
        stmt = (
            select(Conversation, message_count)
            .outerjoin(Message, Message.conversation_id == Conversation.id)
            .group_by(Conversation.id)
            .order_by(Conversation.updated_at.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [summary_from_row(row, count) for row, count in result.all()]

    async def delete_conversation(self, conversation_id: str) -> None:
        """Delete the conversation and all of its messages in one transaction."""
        async with self._session_factory() as session, session.begin():
            await self._lock_conversation(session, conversation_id)
            await session.execute(
                delete(Message).where(Message.conversation_id == conversation_id)
            )
            await session.execute(
                delete(Conversation).where(Conversation.id == conversation_id)
            )
        CONVERSATIONS_DELETED_TOTAL.labels(reason="explicit").inc()
        logger.info("Deleted conversation %s", conversation_id)

    async def purge_conversations(self, created_before: datetime) -> int:
        """Delete every conversation created before *created_before*.

        Returns the number of conversations removed.
        """
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                select(Conversation.id)
                .where(Conversation.created_at < created_before)
                .with_for_update()
            )
            ids = list(result.scalars())
            if ids:
                await session.execute(
                    delete(Message).where(Message.conversation_id.in_(ids))
                )
                await session.execute(
                    delete(Conversation).where(Conversation.id.in_(ids))
                )
        if ids:
            CONVERSATIONS_DELETED_TOTAL.labels(reason="purge").inc(len(ids))
        logger.info(
            "Purged %d conversations created before %s",
            len(ids),
            created_before.isoformat(),
        )
        return len(ids)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def append_message(
        self, conversation_id: str, sender: Sender, text: str
    ) -> StoredMessage:
        """Persist one message and advance the conversation's ``updated_at``."""
        if not text or not text.strip():
            raise ValueError("Message text must not be blank")

        async with self._session_factory() as session, session.begin():
            conversation = await self._lock_conversation(session, conversation_id)
            # Stamped under the lock: created_at follows seq, updated_at is monotonic.
            now = max(utcnow(), as_utc(conversation.updated_at))
            row = Message(
                message_id=new_message_id(),
                conversation_id=conversation_id,
                sender=Sender(sender).value,
                text=text,
                created_at=now,
            )
            session.add(row)
            conversation.updated_at = now
            await session.flush()
            record = message_from_row(row)
        MESSAGES_PERSISTED_TOTAL.labels(sender=record.sender.value).inc()
        return record

    async def list_messages(self, conversation_id: str) -> list[StoredMessage]:
        """All messages of a conversation, oldest first."""
        async with self._session_factory() as session:
            await self._require_conversation(session, conversation_id)
            result = await session.execute(
                select(Message)
                .where(Message.conversation_id == conversation_id)
                .order_by(*_CHRONOLOGICAL)
            )
            return [message_from_row(row) for row in result.scalars()]

    async def recent_messages(
        self, conversation_id: str, limit: int
    ) -> list[StoredMessage]:
        """The *limit* most recent messages, **newest first**."""
        with tracer.start_as_current_span(SPAN_HISTORY_LOAD) as span:
            span.set_attribute(ATTR_CONVERSATION_ID, conversation_id)
            if limit <= 0:
                await self.get_conversation(conversation_id)
                return []
            async with self._session_factory() as session:
                await self._require_conversation(session, conversation_id)
                result = await session.execute(
                    select(Message)
                    .where(Message.conversation_id == conversation_id)
                    .order_by(*_NEWEST_FIRST)
                    .limit(limit)
                )
                messages = [message_from_row(row) for row in result.scalars()]
            span.set_attribute(ATTR_HISTORY_MESSAGE_COUNT, len(messages))
            logger.debug(
                "Loaded %d recent messages for conversation %s",
                len(messages),
                conversation_id,
            )
            return messages

    async def count_messages(
        self, conversation_id: str, sender: Sender | None = None
    ) -> int:
        stmt = select(func.count(Message.seq)).where(
            Message.conversation_id == conversation_id
        )
        if sender is not None:
            stmt = stmt.where(Message.sender == Sender(sender).value)
        async with self._session_factory() as session:
            await self._require_conversation(session, conversation_id)
            return int((await session.execute(stmt)).scalar_one())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    async def _require_conversation(
        session: AsyncSession, conversation_id: str
    ) -> Conversation:
        row = await session.get(Conversation, conversation_id)
        if row is None:
            raise ConversationNotFound(conversation_id)
        return row

    @staticmethod
    async def _lock_conversation(
        session: AsyncSession, conversation_id: str
    ) -> Conversation:
        result = await session.execute(
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ConversationNotFound(conversation_id)
        return row
