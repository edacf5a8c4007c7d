"""Conversation orchestration."""

from .conversation import ConversationService  # noqa: F401
from .deps import get_conversation_service  # noqa: F401
from .models import ChatReply  # noqa: F401
