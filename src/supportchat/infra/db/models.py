"""SQLAlchemy ORM models for conversations and their messages.

Tables are managed by Alembic migrations.  The ``Base.metadata`` naming
convention keeps constraint names deterministic across environments.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base with explicit naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Sender(str, Enum):
    """Author of a message."""

    USER = "user"
    AI = "ai"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# SQLite only autoincrements INTEGER PRIMARY KEY columns.
_SEQ_TYPE = BigInteger().with_variant(Integer(), "sqlite")


class Conversation(Base):
    """A chat session that exclusively owns an ordered list of messages."""

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # lazy="raise": async sessions must never trigger implicit loads.
    messages: Mapped[list["Message"]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [Message.created_at, Message.seq],
        lazy="raise",
    )

    __table_args__ = (Index("ix_conversations_updated_at", "updated_at"),)

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id!r}, updated_at={self.updated_at!r})>"


class Message(Base):
    """One turn of a conversation.

    ``seq`` is a surrogate autoincrement key; it breaks ``created_at`` ties
    so ordering within a conversation is total.  ``message_id`` is the
    public identifier.
    """

    __tablename__ = "messages"

    seq: Mapped[int] = mapped_column(_SEQ_TYPE, primary_key=True, autoincrement=True)
    message_id: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    conversation_id: Mapped[str] = mapped_column(
        String(40),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender: Mapped[str] = mapped_column(String(8), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    conversation: Mapped[Conversation] = relationship(
        back_populates="messages", lazy="raise"
    )

    __table_args__ = (
        Index(
            "ix_messages_conversation_id_created_at",
            "conversation_id",
            "created_at",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Message(seq={self.seq}, message_id={self.message_id!r}, "
            f"conversation_id={self.conversation_id!r}, sender={self.sender!r})>"
        )
