"""Port for the document database the chat core is stored in.

Documents are JSON bodies addressed by an opaque id, carrying an integer
revision that every write increments. Queries go through named secondary
indexes and materialized views; the concrete store decides how to serve them.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from chat_store.application.exceptions import ValidationError
from chat_store.domain.value_objects.enums import IndexMatch


@dataclass(frozen=True, slots=True)
class StoredDocument:
    id: str
    rev: int
    doc_type: str
    body: dict[str, Any]


@dataclass(frozen=True, slots=True)
class SecondaryIndex:
    """Lookup path over one or more body fields.

    ``ALL`` matches the key against the fields in order, ``ANY`` matches a
    single key against any of the fields and ``UNORDERED`` matches the key
    against the fields as a multiset.

    ``matches`` is the reference behaviour for these modes. Stores that push the
    lookup down into their own query language must return the same documents.
    """

    name: str
    doc_type: str
    fields: tuple[str, ...]
    match: IndexMatch = IndexMatch.ALL

    def check_key(self, key: Sequence[Any]) -> None:
        expected = 1 if self.match is IndexMatch.ANY else len(self.fields)
        if len(key) != expected:
            raise ValidationError(
                f"Index {self.name} expects {expected} key value(s), got {len(key)}"
            )

    def matches(self, document: StoredDocument, key: Sequence[Any]) -> bool:
        if document.doc_type != self.doc_type:
            return False
        values = tuple(document.body.get(f) for f in self.fields)
        if self.match is IndexMatch.ANY:
            return key[0] in values
        if self.match is IndexMatch.UNORDERED:
            return Counter(values) == Counter(key)
        return values == tuple(key)


@dataclass(frozen=True, slots=True)
class MaterializedView:
    """Pre-sorted query surface: rows for one key, ordered by (sort_field, id).

    ``row_key`` is the ordering every store must reproduce, including the
    keyset comparison used for ``start_after``.
    """

    name: str
    doc_type: str
    key_field: str
    sort_field: str

    def row_key(self, document: StoredDocument) -> tuple[Any, str]:
        return document.body.get(self.sort_field), document.id


class DocumentStore(Protocol):
    async def get(self, doc_id: str) -> StoredDocument | None: ...

    async def insert(self, doc_type: str, body: dict[str, Any]) -> StoredDocument: ...

    async def replace(
        self, doc_id: str, body: dict[str, Any], *, expected_rev: int
    ) -> StoredDocument:
        """Write ``body`` only if the stored revision is still ``expected_rev``.

        Raises NotFoundError for a missing document and StaleRevisionError when
        another writer got there first.
        """
        ...

    async def list_by(
        self, index: SecondaryIndex, key: Sequence[Any]
    ) -> list[StoredDocument]: ...

    async def query_view(
        self,
        view: MaterializedView,
        key: Any,
        *,
        skip: int = 0,
        limit: int | None = None,
        start_after: tuple[Any, str] | None = None,
    ) -> list[StoredDocument]: ...
