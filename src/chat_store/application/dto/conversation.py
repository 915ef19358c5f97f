from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class NewConversationDTO:
    user_id: str
    user_id2: str
    attributes: dict[str, Any] = field(default_factory=dict)
