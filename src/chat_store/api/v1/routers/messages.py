from __future__ import annotations

from fastapi import APIRouter, Query

from chat_store.api.deps import UoWDep
from chat_store.api.v1.schemas.common import PaginatedResponse
from chat_store.api.v1.schemas.message import MessageResponse, SaveMessageRequest
from chat_store.application.dto.message import MessagePageQuery
from chat_store.config import settings
from chat_store.services import message_service

router = APIRouter(prefix="/api/v1/chat/conversations", tags=["messages"])


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_all_messages(
    conversation_id: str,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await message_service.get_all_messages(conversation_id, uow)
    return [MessageResponse.model_validate(m, from_attributes=True) for m in messages]


@router.get("/{conversation_id}/messages/page", response_model=list[MessageResponse])
async def list_paged_messages(
    conversation_id: str,
    uow: UoWDep,
    page: int = Query(0, ge=0),
    page_size: int = Query(
        settings.MESSAGES_PAGE_SIZE_DEFAULT, ge=1, le=settings.MESSAGES_PAGE_SIZE_MAX,
    ),
) -> list[MessageResponse]:
    messages = await message_service.get_paged_messages(
        conversation_id, MessagePageQuery(page=page, page_size=page_size), uow,
    )
    return [MessageResponse.model_validate(m, from_attributes=True) for m in messages]


@router.get(
    "/{conversation_id}/messages/feed",
    response_model=PaginatedResponse[MessageResponse],
)
async def message_feed(
    conversation_id: str,
    uow: UoWDep,
    cursor: str | None = Query(None),
    limit: int = Query(
        settings.MESSAGES_PAGE_SIZE_DEFAULT, ge=1, le=settings.MESSAGES_PAGE_SIZE_MAX,
    ),
) -> PaginatedResponse[MessageResponse]:
    feed = await message_service.get_message_feed(conversation_id, cursor, limit, uow)
    return PaginatedResponse[MessageResponse](
        items=[MessageResponse.model_validate(m, from_attributes=True) for m in feed.items],
        next_cursor=feed.next_cursor,
    )


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=201)
async def save_message(
    conversation_id: str,
    body: SaveMessageRequest,
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.save_message(body.to_dto(conversation_id), uow)
    return MessageResponse.model_validate(msg, from_attributes=True)
