"""Import all models so Base.metadata knows every table."""
from chat_store.infrastructure.db.models.document import DocumentModel

__all__ = [
    "DocumentModel",
]
