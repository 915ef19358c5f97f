from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Conversation:
    id: str
    user_id: str
    user_id2: str
    delete: bool = False
    attributes: dict[str, Any] = field(default_factory=dict)
    rev: int | None = None

    @property
    def is_active(self) -> bool:
        return not self.delete
