from __future__ import annotations

import logging
from dataclasses import replace
from numbers import Real
from operator import attrgetter

from chat_store.application.cursor import decode_cursor, encode_cursor
from chat_store.application.dto.message import MessageFeed, MessagePageQuery, NewMessageDTO
from chat_store.application.exceptions import StoreError, ValidationError
from chat_store.application.ports.clock import Clock, SystemClock, epoch_millis
from chat_store.application.uow import UnitOfWork
from chat_store.domain.entities.message import Message

logger = logging.getLogger(__name__)

_system_clock = SystemClock()


def _require_conversation_id(conversation_id: object) -> str:
    if not isinstance(conversation_id, str) or not conversation_id:
        raise ValidationError("conversationId must be a non-empty string")
    return conversation_id


async def save_message(
    message: NewMessageDTO,
    uow: UnitOfWork,
    clock: Clock = _system_clock,
) -> Message:
    """Append a message. The referenced conversation is not checked."""
    _require_conversation_id(message.conversation_id)
    if message.timestamp is None:
        message = replace(message, timestamp=epoch_millis(clock))
    elif isinstance(message.timestamp, bool) or not isinstance(message.timestamp, Real):
        raise ValidationError("timestamp must be a number")

    saved = await uow.messages_w.create(message)
    await uow.commit()
    logger.debug("Saved message %s in conversation %s", saved.id, saved.conversation_id)
    return saved


async def get_all_messages(
    conversation_id: str,
    uow: UnitOfWork,
) -> list[Message]:
    """Full history, oldest first. Equal timestamps keep the index order."""
    _require_conversation_id(conversation_id)
    messages = await uow.messages.list_for_conversation(conversation_id)
    return sorted(messages, key=attrgetter("timestamp"))


async def get_paged_messages(
    conversation_id: str,
    query: MessagePageQuery,
    uow: UnitOfWork,
) -> list[Message]:
    """One offset page, in the order the timeline view returns it."""
    _require_conversation_id(conversation_id)
    if query.page < 0:
        raise ValidationError("page must be >= 0")
    if query.page_size < 1:
        raise ValidationError("pageSize must be >= 1")

    try:
        return await uow.messages.list_page(
            conversation_id, skip=query.skip, limit=query.page_size,
        )
    except StoreError as exc:
        raise ValidationError(exc.detail) from exc


async def get_message_feed(
    conversation_id: str,
    cursor: str | None,
    limit: int,
    uow: UnitOfWork,
) -> MessageFeed:
    """Keyset page after ``cursor``; next_cursor is None on the last page."""
    _require_conversation_id(conversation_id)
    if limit < 1:
        raise ValidationError("limit must be >= 1")

    after = decode_cursor(cursor) if cursor else None
    items = await uow.messages.list_after(conversation_id, after=after, limit=limit)
    next_cursor = None
    if len(items) == limit:
        last = items[-1]
        next_cursor = encode_cursor(last.timestamp, last.id)
    return MessageFeed(items=items, next_cursor=next_cursor)
