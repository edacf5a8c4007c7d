"""History windowing: the bounded slice of a conversation sent to the LLM."""

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from supportchat.infra.db.models import Sender
from supportchat.infra.db.records import StoredMessage

DEFAULT_MAX_HISTORY = 10

ROLE_USER: Literal["user"] = "user"
ROLE_ASSISTANT: Literal["assistant"] = "assistant"

_ROLE_BY_SENDER = {
    Sender.USER: ROLE_USER,
    Sender.AI: ROLE_ASSISTANT,
}


class HistoryMessage(BaseModel):
    """A single prior turn in provider vocabulary."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Message sender role")
    content: str = Field(description="Message content")


def window_history(
    messages: Iterable[StoredMessage],
    max_history: int = DEFAULT_MAX_HISTORY,
) -> list[HistoryMessage]:
    """Return the latest ``max_history`` messages, oldest first.

    *messages* may arrive in any order (the store hands them out
    newest-first); they are sorted by ``created_at`` with the insertion
    sequence as tie-breaker.  Pure and deterministic.
    """
    if max_history <= 0:
        return []
    ordered = sorted(messages, key=lambda m: (m.created_at, m.seq))
    return [
        HistoryMessage(role=_ROLE_BY_SENDER[m.sender], content=m.text)
        for m in ordered[-max_history:]
    ]
