from __future__ import annotations

from typing import Any, Protocol

from chat_store.application.dto.message import NewMessageDTO
from chat_store.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_for_conversation(self, conversation_id: str) -> list[Message]:
        """All messages of the conversation, in no guaranteed order."""
        ...

    async def list_page(
        self, conversation_id: str, *, skip: int, limit: int
    ) -> list[Message]: ...

    async def list_after(
        self,
        conversation_id: str,
        *,
        after: tuple[Any, str] | None,
        limit: int,
    ) -> list[Message]: ...


class MessageWriter(Protocol):
    async def create(self, message: NewMessageDTO) -> Message: ...
