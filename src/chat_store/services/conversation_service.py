from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from chat_store.application.dto.conversation import NewConversationDTO
from chat_store.application.exceptions import (
    ActiveConversationExistsError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from chat_store.application.ports.locks import PairLock
from chat_store.application.uow import UnitOfWork
from chat_store.domain.entities.conversation import Conversation
from chat_store.domain.value_objects.ids import pair_key

logger = logging.getLogger(__name__)


def _require_user_id(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} must be a non-empty string")
    return value


async def list_conversations_for_user(
    user_id: str,
    uow: UnitOfWork,
) -> list[Conversation]:
    """All conversations of the user, soft-deleted ones included."""
    _require_user_id(user_id, "userId")
    return await uow.conversations.list_for_user(user_id)


async def ensure_no_active_conversation(
    user_id: str,
    user_id2: str,
    uow: UnitOfWork,
) -> None:
    """Raise ActiveConversationExistsError if the pair already has an active conversation.

    Only the first indexed conversation for the pair is considered. A failed
    lookup is reported as a ValidationError and is not retried.
    """
    _require_user_id(user_id, "userId")
    _require_user_id(user_id2, "userId2")
    try:
        existing = await uow.conversations.first_between(user_id, user_id2)
    except StoreError as exc:
        raise ValidationError(exc.detail) from exc

    if existing is None or not existing.is_active:
        return
    raise ActiveConversationExistsError(existing)


async def create_conversation(
    conversation: NewConversationDTO,
    uow: UnitOfWork,
) -> Conversation:
    """Create unconditionally. Call ensure_no_active_conversation first if uniqueness matters."""
    _require_user_id(conversation.user_id, "userId")
    _require_user_id(conversation.user_id2, "userId2")
    created = await uow.conversations_w.create(conversation)
    await uow.commit()
    logger.info(
        "Created conversation %s between %s and %s",
        created.id, created.user_id, created.user_id2,
    )
    return created


async def open_conversation(
    conversation: NewConversationDTO,
    uow: UnitOfWork,
    lock: PairLock,
) -> tuple[Conversation, bool]:
    """Return the pair's active conversation or create one.

    Check and create run under a lock on the pair key, so concurrent callers
    for the same pair cannot both create. Returns (conversation, created).
    """
    _require_user_id(conversation.user_id, "userId")
    _require_user_id(conversation.user_id2, "userId2")
    async with lock.hold(pair_key(conversation.user_id, conversation.user_id2)):
        try:
            await ensure_no_active_conversation(
                conversation.user_id, conversation.user_id2, uow,
            )
        except ActiveConversationExistsError as exc:
            return exc.conversation, False
        return await create_conversation(conversation, uow), True


async def get_conversation(
    conversation_id: str,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation


async def update_conversation(
    conversation_id: str,
    value: Mapping[str, Any],
    uow: UnitOfWork,
) -> Conversation:
    """Merge ``value`` into the stored conversation; unspecified fields are kept."""
    if not isinstance(value, Mapping):
        raise ValidationError("Update value must be an object")
    for field in ("userId", "userId2"):
        if field in value:
            _require_user_id(value[field], field)
    updated = await uow.conversations_w.merge_update(conversation_id, dict(value))
    await uow.commit()
    return updated


async def soft_delete_conversation(
    conversation_id: str,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await update_conversation(conversation_id, {"delete": True}, uow)
    logger.info("Soft-deleted conversation %s", conversation_id)
    return conversation
