"""Thread store contract consumed by the inbox session."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from inbox_search.models import Thread


@runtime_checkable
class ThreadStore(Protocol):
    """Backend holding threads and their messages.

    Implementations raise ``ThreadStoreError`` (or a subclass) on failure.
    """

    async def fetch_threads(self, owner_id: str) -> list[Thread]:
        """Return the owner's threads, most recently active first."""
        ...

    async def update_message_read_flags(self, message_ids: Sequence[str], is_read: bool) -> None:
        """Persist the read flag of the given messages."""
        ...

    async def delete_thread(self, thread_id: str) -> None:
        """Move a thread to the trash."""
        ...

    async def archive_thread(self, thread_id: str) -> None:
        """Remove a thread from the inbox."""
        ...
