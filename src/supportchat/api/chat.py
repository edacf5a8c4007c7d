"""Chat endpoints: send a message and receive the stored AI reply."""

from fastapi import APIRouter

from supportchat.core.errors import MessageValidationError

from .deps import ConversationServiceDep
from .models import (
    EMPTY_MESSAGE_ERROR,
    ChatRequest,
    ChatResponse,
    SessionChatRequest,
    SessionChatResponse,
)

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("", response_model=ChatResponse, response_model_by_alias=True)
async def send_message(
    chat_request: ChatRequest,
    service: ConversationServiceDep,
) -> ChatResponse:
    """Persist the user message, ask the LLM and return the stored reply.

    Provider failures do not surface as errors: the reply text is then a
    fixed apology that is stored like any other AI message.
    """
    reply = await service.send_message(
        chat_request.conversation_id, chat_request.message
    )
    return ChatResponse.from_reply(reply)


@router.post(
    "/message", response_model=SessionChatResponse, response_model_by_alias=True
)
async def send_session_message(
    chat_request: SessionChatRequest,
    service: ConversationServiceDep,
) -> SessionChatResponse:
    """Session-keyed variant returning ``{reply, sessionId}``."""
    try:
        reply = await service.send_message(
            chat_request.session_id, chat_request.message
        )
    except MessageValidationError as exc:
        raise MessageValidationError(EMPTY_MESSAGE_ERROR) from exc
    return SessionChatResponse(reply=reply.text, session_id=reply.conversation_id)
