"""Session-local read state.

The overlay records threads the user opened (or re-marked unread) during this
process. It is never touched by a refetch of the thread list and starts empty
on every load.
"""

from __future__ import annotations

from collections.abc import Iterator


class ReadStateOverlay:
    """Set of thread IDs to treat as read whatever the server flags say."""

    def __init__(self) -> None:
        self._read: set[str] = set()

    def mark_read(self, thread_id: str) -> None:
        self._read.add(thread_id)

    def mark_unread(self, thread_id: str) -> None:
        self._read.discard(thread_id)

    def is_marked_read(self, thread_id: str) -> bool:
        return thread_id in self._read

    def clear(self) -> None:
        self._read.clear()

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._read

    def __iter__(self) -> Iterator[str]:
        return iter(self._read)

    def __len__(self) -> int:
        return len(self._read)

    def __repr__(self) -> str:
        return f"ReadStateOverlay({sorted(self._read)!r})"
