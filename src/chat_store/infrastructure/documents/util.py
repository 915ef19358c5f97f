from __future__ import annotations

import logging
from typing import Any, Sequence

from chat_store.application.exceptions import NotFoundError
from chat_store.application.ports.document_store import (
    DocumentStore,
    SecondaryIndex,
    StoredDocument,
)

logger = logging.getLogger(__name__)

RESERVED_FIELDS = frozenset({"id", "rev", "_id", "_rev"})


def strip_reserved(value: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in value.items() if k not in RESERVED_FIELDS}


class DocumentUtil:
    """Small helpers shared by the document-backed repositories."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def create_document(
        self, doc_type: str, body: dict[str, Any]
    ) -> StoredDocument:
        doc = await self._store.insert(doc_type, strip_reserved(body))
        logger.debug("Created %s document %s", doc_type, doc.id)
        return doc

    async def get_document(
        self, doc_id: str, doc_type: str | None = None
    ) -> StoredDocument | None:
        doc = await self._store.get(doc_id)
        if doc is None or (doc_type is not None and doc.doc_type != doc_type):
            return None
        return doc

    async def update_document(
        self,
        doc_id: str,
        value: dict[str, Any],
        *,
        doc_type: str | None = None,
    ) -> StoredDocument:
        """Overlay ``value`` onto the stored body and write it back.

        The write is checked against the revision that was read, so a
        concurrent update surfaces as StaleRevisionError instead of being
        silently overwritten.
        """
        current = await self.get_document(doc_id, doc_type)
        if current is None:
            raise NotFoundError(f"Document {doc_id} not found")

        merged = {**current.body, **strip_reserved(value)}
        updated = await self._store.replace(doc_id, merged, expected_rev=current.rev)
        logger.debug("Updated document %s to rev %d", doc_id, updated.rev)
        return updated

    async def retrieve_single_value(
        self, index: SecondaryIndex, key: Sequence[Any]
    ) -> StoredDocument | None:
        docs = await self.retrieve_all_values(index, key)
        return docs[0] if docs else None

    async def retrieve_all_values(
        self, index: SecondaryIndex, key: Sequence[Any]
    ) -> list[StoredDocument]:
        index.check_key(key)
        return await self._store.list_by(index, key)
