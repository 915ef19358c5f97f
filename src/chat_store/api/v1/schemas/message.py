from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from chat_store.application.dto.message import NewMessageDTO


class SaveMessageRequest(BaseModel):
    """Sender, body and any other payload are passed through as extra fields."""

    timestamp: int | float | None = None

    model_config = ConfigDict(extra="allow")

    def to_dto(self, conversation_id: str) -> NewMessageDTO:
        return NewMessageDTO(
            conversation_id=conversation_id,
            timestamp=self.timestamp,
            attributes=dict(self.model_extra or {}),
        )


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    timestamp: int | float
    attributes: dict[str, Any]

    model_config = {"from_attributes": True}
