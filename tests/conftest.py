"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import copy
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Sequence

import pytest

from chat_store.application.dto.conversation import NewConversationDTO
from chat_store.application.dto.message import NewMessageDTO
from chat_store.application.exceptions import NotFoundError, StaleRevisionError, StoreError
from chat_store.application.ports.document_store import (
    MaterializedView,
    SecondaryIndex,
    StoredDocument,
)
from chat_store.infrastructure.documents.uow import DocumentUoW


def new_conversation(
    user_id: str = "u1",
    user_id2: str = "u2",
    **attributes: Any,
) -> NewConversationDTO:
    return NewConversationDTO(user_id=user_id, user_id2=user_id2, attributes=attributes)


def new_message(
    conversation_id: str,
    timestamp: int | float | None = None,
    body: str = "hello",
) -> NewMessageDTO:
    return NewMessageDTO(
        conversation_id=conversation_id,
        timestamp=timestamp,
        attributes={"sender": "u1", "body": body},
    )


@dataclass
class FakeDocumentStore:
    """In-memory document store. Lookups return documents in insertion order."""

    _docs: dict[str, StoredDocument] = field(default_factory=dict)
    # operation names ("get", "insert", "replace", "list_by", "query_view") that raise StoreError
    fail_on: set[str] = field(default_factory=set)
    view_calls: list[dict[str, Any]] = field(default_factory=list)

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(f"{operation} unavailable")

    async def get(self, doc_id: str) -> StoredDocument | None:
        self._check("get")
        doc = self._docs.get(doc_id)
        return copy.deepcopy(doc) if doc else None

    async def insert(self, doc_type: str, body: dict[str, Any]) -> StoredDocument:
        self._check("insert")
        doc = StoredDocument(id=uuid.uuid4().hex, rev=1, doc_type=doc_type, body=copy.deepcopy(body))
        self._docs[doc.id] = doc
        return copy.deepcopy(doc)

    async def replace(
        self, doc_id: str, body: dict[str, Any], *, expected_rev: int
    ) -> StoredDocument:
        self._check("replace")
        current = self._docs.get(doc_id)
        if current is None:
            raise NotFoundError(f"Document {doc_id} not found")
        if current.rev != expected_rev:
            raise StaleRevisionError(f"Document {doc_id} changed since revision {expected_rev}")
        doc = StoredDocument(
            id=doc_id, rev=current.rev + 1, doc_type=current.doc_type, body=copy.deepcopy(body),
        )
        self._docs[doc_id] = doc
        return copy.deepcopy(doc)

    async def list_by(self, index: SecondaryIndex, key: Sequence[Any]) -> list[StoredDocument]:
        self._check("list_by")
        return [copy.deepcopy(d) for d in self._docs.values() if index.matches(d, key)]

    async def query_view(
        self,
        view: MaterializedView,
        key: Any,
        *,
        skip: int = 0,
        limit: int | None = None,
        start_after: tuple[Any, str] | None = None,
    ) -> list[StoredDocument]:
        self._check("query_view")
        self.view_calls.append({"view": view.name, "key": key, "skip": skip, "limit": limit})
        rows = sorted(
            (
                d for d in self._docs.values()
                if d.doc_type == view.doc_type and d.body.get(view.key_field) == key
            ),
            key=view.row_key,
        )
        if start_after is not None:
            rows = [d for d in rows if view.row_key(d) > start_after]
        rows = rows[skip:]
        if limit is not None:
            rows = rows[:limit]
        return [copy.deepcopy(d) for d in rows]

    def seed(self, doc_type: str, body: dict[str, Any], doc_id: str | None = None) -> StoredDocument:
        doc = StoredDocument(id=doc_id or uuid.uuid4().hex, rev=1, doc_type=doc_type, body=body)
        self._docs[doc.id] = doc
        return doc


class FakeUoW(DocumentUoW):
    """In-memory UoW for unit tests."""

    def __init__(self, store: FakeDocumentStore | None = None) -> None:
        super().__init__(store or FakeDocumentStore())
        self._committed = False
        self.commits = 0

    async def commit(self) -> None:
        self._committed = True
        self.commits += 1

    async def rollback(self) -> None:
        pass


class FakePairLock:
    """Per-key asyncio locks; records every key it was asked to hold."""

    def __init__(self) -> None:
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.held: list[str] = []

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        async with self._locks[key]:
            self.held.append(key)
            yield


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def uow(store: FakeDocumentStore) -> FakeUoW:
    return FakeUoW(store)


@pytest.fixture
def pair_lock() -> FakePairLock:
    return FakePairLock()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
