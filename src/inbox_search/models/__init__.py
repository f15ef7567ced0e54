"""Data models for Inbox Search.

This module contains Pydantic models for threads, messages and parsed queries.
"""

from inbox_search.models.query import (
    ActiveChip,
    DateBound,
    FolderFilter,
    FolderKind,
    ParsedQuery,
)
from inbox_search.models.thread import Message, Thread

__all__ = [
    "ActiveChip",
    "DateBound",
    "FolderFilter",
    "FolderKind",
    "Message",
    "ParsedQuery",
    "Thread",
]
