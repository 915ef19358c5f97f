from __future__ import annotations

from typing import Any

from chat_store.application.dto.conversation import NewConversationDTO
from chat_store.application.ports.document_store import StoredDocument
from chat_store.domain.entities.conversation import Conversation

_KNOWN_FIELDS = ("userId", "userId2", "delete")


def document_to_entity(doc: StoredDocument) -> Conversation:
    body = doc.body
    return Conversation(
        id=doc.id,
        user_id=body["userId"],
        user_id2=body["userId2"],
        delete=bool(body.get("delete")),
        attributes={k: v for k, v in body.items() if k not in _KNOWN_FIELDS},
        rev=doc.rev,
    )


def dto_to_body(dto: NewConversationDTO) -> dict[str, Any]:
    return {
        **dto.attributes,
        "userId": dto.user_id,
        "userId2": dto.user_id2,
        "delete": False,
    }
