from __future__ import annotations

from typing import Any

from chat_store.application.dto.conversation import NewConversationDTO
from chat_store.domain.entities.conversation import Conversation
from chat_store.domain.value_objects.enums import DocumentType
from chat_store.infrastructure.documents.design import (
    CONVERSATIONS_BY_PAIR,
    CONVERSATIONS_BY_PARTICIPANT,
)
from chat_store.infrastructure.documents.mappers import conversation as mapper
from chat_store.infrastructure.documents.util import DocumentUtil


class ConversationReaderRepo:
    def __init__(self, util: DocumentUtil) -> None:
        self._util = util

    async def get_by_id(self, conversation_id: str) -> Conversation | None:
        doc = await self._util.get_document(conversation_id, DocumentType.CONVERSATION)
        return mapper.document_to_entity(doc) if doc else None

    async def list_for_user(self, user_id: str) -> list[Conversation]:
        docs = await self._util.retrieve_all_values(CONVERSATIONS_BY_PARTICIPANT, (user_id,))
        return [mapper.document_to_entity(d) for d in docs]

    async def first_between(self, user_id: str, user_id2: str) -> Conversation | None:
        doc = await self._util.retrieve_single_value(
            CONVERSATIONS_BY_PAIR, (user_id, user_id2)
        )
        return mapper.document_to_entity(doc) if doc else None


class ConversationWriterRepo:
    def __init__(self, util: DocumentUtil) -> None:
        self._util = util

    async def create(self, conversation: NewConversationDTO) -> Conversation:
        doc = await self._util.create_document(
            DocumentType.CONVERSATION, mapper.dto_to_body(conversation)
        )
        return mapper.document_to_entity(doc)

    async def merge_update(
        self, conversation_id: str, value: dict[str, Any]
    ) -> Conversation:
        doc = await self._util.update_document(
            conversation_id, value, doc_type=DocumentType.CONVERSATION
        )
        return mapper.document_to_entity(doc)
