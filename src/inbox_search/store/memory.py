"""In-process thread store.

Useful for tests and for running searches offline against a JSON snapshot of
threads (a list of thread objects as produced by ``Thread.model_dump``).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from inbox_search.exceptions import ThreadStoreError
from inbox_search.models import Thread

logger = structlog.get_logger()

_THREAD_LIST = TypeAdapter(list[Thread])


class InMemoryThreadStore:
    """Thread store backed by a list held in memory.

    Mutations are applied to the stored copies so a following
    ``fetch_threads`` reflects them, like a real backend would.
    """

    def __init__(self, threads: Iterable[Thread] = ()) -> None:
        self._threads: list[Thread] = [t.model_copy(deep=True) for t in threads]

    @classmethod
    def from_json_file(cls, path: Path) -> InMemoryThreadStore:
        """Load a JSON thread snapshot.

        Raises:
            ThreadStoreError: If the file is missing or not a valid snapshot.
        """
        try:
            threads = _THREAD_LIST.validate_json(path.read_bytes())
        except OSError as exc:
            raise ThreadStoreError(f"Cannot read thread snapshot {path}: {exc}") from exc
        except ValidationError as exc:
            raise ThreadStoreError(f"Invalid thread snapshot {path}: {exc}") from exc

        logger.info("thread_snapshot_loaded", path=str(path), thread_count=len(threads))
        return cls(threads)

    async def fetch_threads(self, owner_id: str) -> list[Thread]:
        return [t.model_copy(deep=True) for t in self._threads]

    async def update_message_read_flags(self, message_ids: Sequence[str], is_read: bool) -> None:
        wanted = set(message_ids)
        updated = 0
        for thread in self._threads:
            for message in thread.messages:
                if message.id in wanted:
                    message.is_read = is_read
                    updated += 1
        logger.debug("read_flags_updated", requested=len(wanted), updated=updated, is_read=is_read)

    async def delete_thread(self, thread_id: str) -> None:
        thread = self._get(thread_id)
        thread.labels = [label for label in thread.labels if label != "INBOX"]
        if "TRASH" not in thread.labels:
            thread.labels.append("TRASH")

    async def archive_thread(self, thread_id: str) -> None:
        thread = self._get(thread_id)
        thread.labels = [label for label in thread.labels if label != "INBOX"]

    def _get(self, thread_id: str) -> Thread:
        for thread in self._threads:
            if thread.id == thread_id:
                return thread
        raise ThreadStoreError(f"Unknown thread: {thread_id}")
