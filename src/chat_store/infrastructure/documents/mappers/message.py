from __future__ import annotations

from typing import Any

from chat_store.application.dto.message import NewMessageDTO
from chat_store.application.ports.document_store import StoredDocument
from chat_store.domain.entities.message import Message

_KNOWN_FIELDS = ("conversationId", "timestamp")


def document_to_entity(doc: StoredDocument) -> Message:
    body = doc.body
    return Message(
        id=doc.id,
        conversation_id=body["conversationId"],
        timestamp=body["timestamp"],
        attributes={k: v for k, v in body.items() if k not in _KNOWN_FIELDS},
    )


def dto_to_body(dto: NewMessageDTO) -> dict[str, Any]:
    return {
        **dto.attributes,
        "conversationId": dto.conversation_id,
        "timestamp": dto.timestamp,
    }
