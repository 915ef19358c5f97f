from __future__ import annotations

from typing import Any

from chat_store.application.dto.message import NewMessageDTO
from chat_store.domain.entities.message import Message
from chat_store.domain.value_objects.enums import DocumentType
from chat_store.infrastructure.documents.design import (
    MESSAGES_BY_CONVERSATION,
    MESSAGES_BY_CONVERSATION_PAGE,
)
from chat_store.infrastructure.documents.mappers import message as mapper
from chat_store.infrastructure.documents.util import DocumentUtil


class MessageReaderRepo:
    def __init__(self, util: DocumentUtil) -> None:
        self._util = util

    async def list_for_conversation(self, conversation_id: str) -> list[Message]:
        docs = await self._util.retrieve_all_values(MESSAGES_BY_CONVERSATION, (conversation_id,))
        return [mapper.document_to_entity(d) for d in docs]

    async def list_page(
        self,
        conversation_id: str,
        *,
        skip: int,
        limit: int,
    ) -> list[Message]:
        docs = await self._util.store.query_view(
            MESSAGES_BY_CONVERSATION_PAGE, conversation_id, skip=skip, limit=limit,
        )
        return [mapper.document_to_entity(d) for d in docs]

    async def list_after(
        self,
        conversation_id: str,
        *,
        after: tuple[Any, str] | None,
        limit: int,
    ) -> list[Message]:
        docs = await self._util.store.query_view(
            MESSAGES_BY_CONVERSATION_PAGE, conversation_id, limit=limit, start_after=after,
        )
        return [mapper.document_to_entity(d) for d in docs]


class MessageWriterRepo:
    def __init__(self, util: DocumentUtil) -> None:
        self._util = util

    async def create(self, message: NewMessageDTO) -> Message:
        doc = await self._util.create_document(DocumentType.MESSAGE, mapper.dto_to_body(message))
        return mapper.document_to_entity(doc)
