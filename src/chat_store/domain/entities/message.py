from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    conversation_id: str
    timestamp: int | float
    attributes: dict[str, Any] = field(default_factory=dict)
