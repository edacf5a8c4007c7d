"""Conversation management endpoints."""

from fastapi import APIRouter, Query, Response, status

from .deps import ConversationServiceDep
from .models import (
    ConversationResponse,
    ConversationSummaryResponse,
    MessageResponse,
)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.post(
    "",
    response_model=ConversationResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
async def create_conversation(service: ConversationServiceDep) -> ConversationResponse:
    record = await service.create_conversation()
    return ConversationResponse.from_record(record)


@router.get(
    "",
    response_model=list[ConversationSummaryResponse],
    response_model_by_alias=True,
)
async def list_conversations(
    service: ConversationServiceDep,
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> list[ConversationSummaryResponse]:
    """Most recently active conversations first."""
    summaries = await service.list_conversations(limit)
    return [ConversationSummaryResponse.from_summary(s) for s in summaries]


@router.get(
    "/{conversation_id}",
    response_model=ConversationResponse,
    response_model_by_alias=True,
)
async def get_conversation(
    conversation_id: str, service: ConversationServiceDep
) -> ConversationResponse:
    record = await service.get_conversation(conversation_id)
    return ConversationResponse.from_record(record)


@router.get(
    "/{conversation_id}/messages",
    response_model=list[MessageResponse],
    response_model_by_alias=True,
)
async def list_messages(
    conversation_id: str, service: ConversationServiceDep
) -> list[MessageResponse]:
    """Full transcript, oldest first."""
    messages = await service.list_messages(conversation_id)
    return [MessageResponse.from_record(m) for m in messages]


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: str, service: ConversationServiceDep
) -> Response:
    await service.delete_conversation(conversation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
