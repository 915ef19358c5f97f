"""Secondary indexes and views the chat core queries."""
from __future__ import annotations

from chat_store.application.ports.document_store import MaterializedView, SecondaryIndex
from chat_store.domain.value_objects.enums import DocumentType, IndexMatch

CONVERSATIONS_BY_PARTICIPANT = SecondaryIndex(
    name="conversations_by_participant",
    doc_type=DocumentType.CONVERSATION,
    fields=("userId", "userId2"),
    match=IndexMatch.ANY,
)

CONVERSATIONS_BY_PAIR = SecondaryIndex(
    name="conversations_by_pair",
    doc_type=DocumentType.CONVERSATION,
    fields=("userId", "userId2"),
    match=IndexMatch.UNORDERED,
)

MESSAGES_BY_CONVERSATION = SecondaryIndex(
    name="messages_by_conversation",
    doc_type=DocumentType.MESSAGE,
    fields=("conversationId",),
)

MESSAGES_BY_CONVERSATION_PAGE = MaterializedView(
    name="messages_by_conversation_page",
    doc_type=DocumentType.MESSAGE,
    key_field="conversationId",
    sort_field="timestamp",
)
