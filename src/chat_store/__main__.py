"""Entrypoint: python -m chat_store"""
from __future__ import annotations

import uvicorn

from chat_store.config import settings


def main() -> None:
    uvicorn.run(
        "chat_store.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
