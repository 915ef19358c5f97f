from __future__ import annotations

from typing import AsyncContextManager, Protocol


class PairLock(Protocol):
    def hold(self, key: str) -> AsyncContextManager[None]:
        """Serialize callers on ``key`` until the context exits."""
        ...
