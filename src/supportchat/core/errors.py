"""Domain exceptions surfaced to the HTTP layer.

``NotFoundError`` maps to 404 and ``MessageValidationError`` to 400.
LLM failures live in ``supportchat.core.llm.errors`` and are absorbed by the
adapter instead.
"""


class NotFoundError(Exception):
    """A requested entity does not exist."""


class ConversationNotFound(NotFoundError):
    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class MessageValidationError(ValueError):
    """Inbound message rejected before it reaches the store."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
