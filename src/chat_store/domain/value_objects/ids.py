from __future__ import annotations


def pair_key(user_id: str, user_id2: str) -> str:
    """Canonical key for an unordered pair of participants."""
    first, second = sorted((user_id, user_id2))
    return f"{first}:{second}"
