from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from chat_store.application.dto.conversation import NewConversationDTO


class CreateConversationRequest(BaseModel):
    """Participants plus any extra fields, which are stored as given."""

    user_id: str = Field(min_length=1)
    user_id2: str = Field(min_length=1)

    model_config = ConfigDict(extra="allow")

    def to_dto(self) -> NewConversationDTO:
        return NewConversationDTO(
            user_id=self.user_id,
            user_id2=self.user_id2,
            attributes=dict(self.model_extra or {}),
        )


class ConversationResponse(BaseModel):
    id: str
    user_id: str
    user_id2: str
    delete: bool
    attributes: dict[str, Any]
    rev: int | None

    model_config = {"from_attributes": True}


class OpenConversationResponse(BaseModel):
    conversation: ConversationResponse
    created: bool
