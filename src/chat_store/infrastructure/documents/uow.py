from __future__ import annotations

from abc import ABC, abstractmethod

from chat_store.application.ports.document_store import DocumentStore
from chat_store.infrastructure.documents.repositories.conversation import (
    ConversationReaderRepo,
    ConversationWriterRepo,
)
from chat_store.infrastructure.documents.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from chat_store.infrastructure.documents.util import DocumentUtil


class DocumentUoW(ABC):
    """Repositories over one document store. Subclasses decide what commit means."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        util = DocumentUtil(store)
        self.conversations = ConversationReaderRepo(util)
        self.conversations_w = ConversationWriterRepo(util)
        self.messages = MessageReaderRepo(util)
        self.messages_w = MessageWriterRepo(util)

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
