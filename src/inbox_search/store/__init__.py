"""Thread stores: the contract and an in-memory implementation.

The Gmail-backed store lives in ``inbox_search.gmail``.
"""

from .base import ThreadStore
from .memory import InMemoryThreadStore

__all__ = ["InMemoryThreadStore", "ThreadStore"]
