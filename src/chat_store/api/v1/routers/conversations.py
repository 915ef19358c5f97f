from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Query, Response, status

from chat_store.api.deps import PairLockDep, UoWDep
from chat_store.api.v1.schemas.common import ErrorResponse
from chat_store.api.v1.schemas.conversation import (
    ConversationResponse,
    CreateConversationRequest,
    OpenConversationResponse,
)
from chat_store.domain.entities.conversation import Conversation
from chat_store.services import conversation_service

router = APIRouter(prefix="/api/v1/chat", tags=["conversations"])


def _to_response(conversation: Conversation) -> ConversationResponse:
    return ConversationResponse.model_validate(conversation, from_attributes=True)


@router.get("/users/{user_id}/conversations", response_model=list[ConversationResponse])
async def list_user_conversations(
    user_id: str,
    uow: UoWDep,
) -> list[ConversationResponse]:
    convs = await conversation_service.list_conversations_for_user(user_id, uow)
    return [_to_response(c) for c in convs]


@router.get(
    "/conversations/availability",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={409: {"description": "An active conversation already exists"}},
)
async def check_availability(
    uow: UoWDep,
    user_id: str = Query(..., min_length=1),
    user_id2: str = Query(..., min_length=1),
) -> Response:
    await conversation_service.ensure_no_active_conversation(user_id, user_id2, uow)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/conversations",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    body: CreateConversationRequest,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.create_conversation(body.to_dto(), uow)
    return _to_response(conv)


@router.post("/conversations/open", response_model=OpenConversationResponse)
async def open_conversation(
    body: CreateConversationRequest,
    uow: UoWDep,
    lock: PairLockDep,
) -> OpenConversationResponse:
    conv, created = await conversation_service.open_conversation(body.to_dto(), uow, lock)
    return OpenConversationResponse(conversation=_to_response(conv), created=created)


@router.get(
    "/conversations/{conversation_id}",
    response_model=ConversationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_conversation(
    conversation_id: str,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.get_conversation(conversation_id, uow)
    return _to_response(conv)


@router.patch(
    "/conversations/{conversation_id}",
    response_model=ConversationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_conversation(
    conversation_id: str,
    uow: UoWDep,
    value: dict[str, Any] = Body(...),
) -> ConversationResponse:
    conv = await conversation_service.update_conversation(conversation_id, value, uow)
    return _to_response(conv)


@router.delete(
    "/conversations/{conversation_id}",
    response_model=ConversationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def soft_delete_conversation(
    conversation_id: str,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.soft_delete_conversation(conversation_id, uow)
    return _to_response(conv)
