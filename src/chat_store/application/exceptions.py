from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chat_store.domain.entities.conversation import Conversation


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    pass


class ActiveConversationExistsError(ConflictError):
    """An active conversation already exists for the requested pair."""

    def __init__(self, conversation: Conversation) -> None:
        self.conversation = conversation
        super().__init__(f"Active conversation {conversation.id} already exists")


class StaleRevisionError(ConflictError):
    """The document changed since it was read. Re-read and retry."""


class ValidationError(AppError):
    pass


class StoreError(AppError):
    """Any other failure reported by the document store."""
