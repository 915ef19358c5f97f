from __future__ import annotations

from enum import StrEnum


class DocumentType(StrEnum):
    CONVERSATION = "conversation"
    MESSAGE = "message"


class IndexMatch(StrEnum):
    ALL = "all"
    ANY = "any"
    UNORDERED = "unordered"
