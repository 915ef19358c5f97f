"""PostgreSQL-backed document store: one JSONB table, typed by ``doc_type``."""
from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from itertools import permutations
from typing import Any, Iterator, Sequence

from sqlalchemy import Select, and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chat_store.application.exceptions import NotFoundError, StaleRevisionError, StoreError
from chat_store.application.ports.document_store import (
    MaterializedView,
    SecondaryIndex,
    StoredDocument,
)
from chat_store.domain.value_objects.enums import IndexMatch
from chat_store.infrastructure.db.models.document import DocumentModel

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning("Document store %s failed: %s", operation, exc)
        raise StoreError(f"Document store {operation} failed") from exc


def _to_document(model: DocumentModel) -> StoredDocument:
    return StoredDocument(
        id=model.id,
        rev=model.rev,
        doc_type=model.doc_type,
        body=dict(model.body),
    )


def _index_clause(index: SecondaryIndex, key: Sequence[Any]) -> Any:
    body = DocumentModel.body
    if index.match is IndexMatch.ANY:
        return or_(*(body.contains({f: key[0]}) for f in index.fields))
    if index.match is IndexMatch.UNORDERED:
        return or_(
            *(body.contains(dict(zip(index.fields, p))) for p in set(permutations(key)))
        )
    return body.contains(dict(zip(index.fields, key)))


def _view_statement(
    view: MaterializedView,
    key: Any,
    *,
    skip: int = 0,
    limit: int | None = None,
    start_after: tuple[Any, str] | None = None,
) -> Select:
    sort_col = DocumentModel.body[view.sort_field].as_float()
    stmt = (
        select(DocumentModel)
        .where(
            DocumentModel.doc_type == view.doc_type,
            DocumentModel.body.contains({view.key_field: key}),
        )
        .order_by(sort_col.asc(), DocumentModel.id.asc())
        .offset(skip)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    if start_after is not None:
        ts, doc_id = start_after
        stmt = stmt.where(
            or_(sort_col > ts, and_(sort_col == ts, DocumentModel.id > doc_id))
        )
    return stmt


class SqlDocumentStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, doc_id: str) -> StoredDocument | None:
        with _store_errors("get"):
            model = await self._session.get(DocumentModel, doc_id)
        return _to_document(model) if model else None

    async def insert(self, doc_type: str, body: dict[str, Any]) -> StoredDocument:
        model = DocumentModel(id=uuid.uuid4().hex, doc_type=doc_type, rev=1, body=body)
        with _store_errors("insert"):
            self._session.add(model)
            await self._session.flush()
        return _to_document(model)

    async def replace(
        self,
        doc_id: str,
        body: dict[str, Any],
        *,
        expected_rev: int,
    ) -> StoredDocument:
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == doc_id, DocumentModel.rev == expected_rev)
            .values(body=body, rev=DocumentModel.rev + 1)
            .returning(DocumentModel.rev, DocumentModel.doc_type)
        )
        with _store_errors("replace"):
            result = await self._session.execute(stmt)
            row = result.one_or_none()
            if row is not None:
                return StoredDocument(id=doc_id, rev=row.rev, doc_type=row.doc_type, body=body)
            exists = await self._session.scalar(
                select(DocumentModel.id).where(DocumentModel.id == doc_id)
            )

        if exists is None:
            raise NotFoundError(f"Document {doc_id} not found")
        raise StaleRevisionError(
            f"Document {doc_id} changed since revision {expected_rev}"
        )

    async def list_by(
        self,
        index: SecondaryIndex,
        key: Sequence[Any],
    ) -> list[StoredDocument]:
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.doc_type == index.doc_type, _index_clause(index, key))
            .order_by(DocumentModel.seq.asc())
        )
        with _store_errors(f"lookup on {index.name}"):
            result = await self._session.execute(stmt)
            return [_to_document(m) for m in result.scalars().all()]

    async def query_view(
        self,
        view: MaterializedView,
        key: Any,
        *,
        skip: int = 0,
        limit: int | None = None,
        start_after: tuple[Any, str] | None = None,
    ) -> list[StoredDocument]:
        stmt = _view_statement(view, key, skip=skip, limit=limit, start_after=start_after)
        with _store_errors(f"query on {view.name}"):
            result = await self._session.execute(stmt)
            return [_to_document(m) for m in result.scalars().all()]
