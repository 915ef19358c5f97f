from __future__ import annotations

from typing import Any, Protocol

from chat_store.application.dto.conversation import NewConversationDTO
from chat_store.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: str) -> Conversation | None: ...

    async def list_for_user(self, user_id: str) -> list[Conversation]:
        """Every conversation the user takes part in, deleted ones included."""
        ...

    async def first_between(self, user_id: str, user_id2: str) -> Conversation | None:
        """First conversation indexed for the pair, in either field order."""
        ...


class ConversationWriter(Protocol):
    async def create(self, conversation: NewConversationDTO) -> Conversation: ...

    async def merge_update(
        self, conversation_id: str, value: dict[str, Any]
    ) -> Conversation: ...
