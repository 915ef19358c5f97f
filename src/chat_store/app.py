from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_store.api.middleware.request_context import (
    RequestContextMiddleware,
    correlation_id_ctx,
)
from chat_store.api.v1.routers import conversations, health, messages
from chat_store.api.v1.schemas.conversation import ConversationResponse
from chat_store.application.exceptions import (
    ActiveConversationExistsError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from chat_store.config import settings
from chat_store.infrastructure.db.session import dispose_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    yield

    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Chat Store",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        content: dict[str, object] = {"detail": exc.detail}
        if isinstance(exc, ActiveConversationExistsError):
            content["conversation"] = ConversationResponse.model_validate(
                exc.conversation, from_attributes=True,
            ).model_dump(mode="json")
        return JSONResponse(status_code=409, content=content)

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(StoreError)
    async def _store(_req: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure [%s]: %s", correlation_id_ctx.get(), exc.detail)
        return JSONResponse(status_code=503, content={"detail": exc.detail})
