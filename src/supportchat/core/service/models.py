"""Service-layer result types."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatReply(BaseModel):
    """The persisted AI turn produced by ``ConversationService.send_message``."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str = Field(description="Conversation the reply belongs to")
    message_id: str = Field(description="Id of the stored AI message")
    text: str = Field(description="Reply text")
    sender: Literal["ai"] = "ai"
    timestamp: datetime = Field(description="When the reply was stored")
