from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chat_store.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class NewMessageDTO:
    conversation_id: str
    timestamp: int | float | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MessagePageQuery:
    """Zero-indexed offset page."""

    page: int = 0
    page_size: int = 20

    @property
    def skip(self) -> int:
        return self.page * self.page_size


@dataclass(frozen=True, slots=True)
class MessageFeed:
    items: list[Message]
    next_cursor: str | None = None
