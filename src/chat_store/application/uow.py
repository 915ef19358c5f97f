from __future__ import annotations

from typing import Protocol

from chat_store.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from chat_store.application.repositories.message import MessageReader, MessageWriter


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
