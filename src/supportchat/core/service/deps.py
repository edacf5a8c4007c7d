"""FastAPI dependency factory for the conversation service.

Per-request, with an explicit ``Depends`` chain: the store is built from the
session factory on ``app.state`` and the adapter is the process-wide one.
"""

from typing import Annotated

from fastapi import Depends

from supportchat.configs.config import get_chat_config
from supportchat.configs.system import ChatConfig
from supportchat.core.llm import LLMAdapter, get_llm_adapter
from supportchat.infra.db import MessageStore, get_message_store

from .conversation import ConversationService


def get_conversation_service(
    store: Annotated[MessageStore, Depends(get_message_store)],
    adapter: Annotated[LLMAdapter, Depends(get_llm_adapter)],
    config: Annotated[ChatConfig, Depends(get_chat_config)],
) -> ConversationService:
    return ConversationService(store, adapter, config)
