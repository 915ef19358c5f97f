"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from chat_store.application.ports.locks import PairLock
from chat_store.application.uow import UnitOfWork
from chat_store.config import settings
from chat_store.infrastructure.db.session import AsyncSessionLocal
from chat_store.infrastructure.db.uow import SqlAlchemyUoW
from chat_store.infrastructure.locks.redis_lock import RedisPairLock


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


def get_pair_lock(request: Request) -> PairLock:
    return RedisPairLock(
        request.app.state.redis,
        prefix=settings.PAIR_LOCK_PREFIX,
        timeout=settings.PAIR_LOCK_TIMEOUT,
        blocking_timeout=settings.PAIR_LOCK_BLOCKING_TIMEOUT,
    )


PairLockDep = Annotated[PairLock, Depends(get_pair_lock)]
