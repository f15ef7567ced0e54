"""Inbox state behind the mail list: search text, folder tab, page and read overlay.

Everything here runs on one event loop. Filtering is recomputed synchronously
from the last fetched snapshot on every call; refreshes replace the snapshot
when they complete and never touch the read overlay.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from inbox_search.config import Settings
from inbox_search.models import ActiveChip, ParsedQuery, Thread
from inbox_search.search import (
    DEFAULT_CATALOG,
    Bucket,
    OperatorSuggestion,
    Suggestion,
    active_chips,
    apply_suggestion,
    bucket_counts,
    derive_facts,
    parse_query,
    select_threads,
    suggestions,
)
from inbox_search.session.overlay import ReadStateOverlay
from inbox_search.session.pagination import page_count, paginate
from inbox_search.store import ThreadStore

logger = structlog.get_logger()


class InboxSession:
    """UI-facing search session over a thread store.

    Attributes:
        overlay: Threads marked read locally during this session.
    """

    def __init__(
        self,
        store: ThreadStore,
        owner_id: str | None = None,
        *,
        settings: Settings | None = None,
        overlay: ReadStateOverlay | None = None,
        page_size: int | None = None,
        catalog: Sequence[OperatorSuggestion] = DEFAULT_CATALOG,
    ) -> None:
        """Create a session.

        Args:
            store: Where threads are fetched from and read flags written to.
            owner_id: Mailbox owner. Defaults to the configured owner.
            settings: Application settings. If None, uses default settings.
            overlay: Read overlay to use; a fresh empty one by default.
            page_size: Threads per page. Defaults to the configured page size.
            catalog: Operators offered as suggestions.
        """
        from inbox_search.config import get_settings

        self.settings = settings or get_settings()
        self.overlay = overlay if overlay is not None else ReadStateOverlay()
        self.page_size = self.settings.page_size if page_size is None else page_size
        self.catalog = tuple(catalog)

        self._store = store
        self._owner_id = owner_id or self.settings.owner_id
        self._threads: list[Thread] = []
        self._search_text = ""
        self._folder = Bucket.INBOX
        self._page = 0
        self._fetch_generation = 0
        self._applied_generation = 0
        self._pending_writes: set[asyncio.Task[None]] = set()

    # State

    @property
    def threads(self) -> list[Thread]:
        """Last successfully fetched snapshot, in store order."""
        return list(self._threads)

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def folder(self) -> Bucket:
        return self._folder

    @property
    def page(self) -> int:
        return self._page

    def set_search_text(self, raw: str) -> None:
        if raw != self._search_text:
            self._search_text = raw
            self._page = 0
            logger.debug("search_text_changed", search_text=raw)

    def set_folder(self, folder: Bucket | str) -> None:
        folder = Bucket(folder)
        if folder is not self._folder:
            self._folder = folder
            self._page = 0
            logger.debug("folder_changed", folder=folder.value)

    def set_page(self, page: int) -> None:
        """Select a page. Not clamped: out-of-range pages are simply empty."""
        self._page = page

    # Derived views

    def parsed_query(self) -> ParsedQuery:
        return parse_query(self._search_text)

    def filtered_threads(self) -> list[Thread]:
        return select_threads(self._threads, self._search_text, self._folder, self.overlay)

    def visible_threads(self) -> list[Thread]:
        return paginate(self.filtered_threads(), self.page_size, self._page)

    def result_count(self) -> int:
        return len(self.filtered_threads())

    def page_count(self) -> int:
        return page_count(self.result_count(), self.page_size)

    def active_chips(self) -> list[ActiveChip]:
        return active_chips(self.parsed_query())

    def suggestions(self) -> list[Suggestion]:
        return suggestions(self.catalog, self._search_text)

    def apply_suggestion(self, label: str) -> str:
        """Apply a picked suggestion to the search text and return the new text."""
        self.set_search_text(apply_suggestion(self._search_text, label))
        return self._search_text

    def folder_counts(self) -> dict[Bucket, int]:
        return bucket_counts(self._threads)

    def is_unread(self, thread: Thread) -> bool:
        """Unread state as shown in the list, overlay applied."""
        return derive_facts(thread, self.overlay).is_unread

    # Fetching

    async def refresh(self) -> bool:
        """Fetch a new snapshot from the store.

        A failed fetch keeps the previous snapshot. When fetches overlap, a
        result is dropped only if a later-started fetch has already replaced
        the snapshot; a later fetch that fails supersedes nothing.

        Returns:
            True when the snapshot was replaced.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation

        try:
            threads = await self._store.fetch_threads(self._owner_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "thread_fetch_failed",
                owner_id=self._owner_id,
                error=str(exc),
                stale_thread_count=len(self._threads),
            )
            return False

        if generation < self._applied_generation:
            logger.debug("thread_fetch_superseded", generation=generation)
            return False

        self._applied_generation = generation
        self._threads = list(threads)
        logger.info("threads_refreshed", owner_id=self._owner_id, thread_count=len(threads))
        return True

    async def poll(
        self,
        interval: float | None = None,
        stop: asyncio.Event | None = None,
    ) -> None:
        """Refresh on a fixed interval until ``stop`` is set.

        Args:
            interval: Seconds between refreshes. Defaults to the configured interval.
            stop: Event ending the loop. Without one, polls until cancelled.

        Raises:
            ValueError: If ``interval`` is not positive.
        """
        if interval is None:
            interval = self.settings.poll_interval_seconds
        if interval <= 0:
            raise ValueError(f"poll interval must be positive, got {interval}")
        stop = stop or asyncio.Event()

        logger.info("thread_polling_started", interval=interval)
        while not stop.is_set():
            await self.refresh()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        logger.info("thread_polling_stopped")

    # Read state

    def mark_read(self, thread_id: str) -> None:
        """Mark a thread read locally and write the flag through in the background."""
        self.overlay.mark_read(thread_id)
        thread = self._find(thread_id)
        unread_ids = [m.id for m in thread.messages if not m.is_read] if thread else []
        self._schedule_read_flag_write(thread_id, unread_ids, True)

    def mark_unread(self, thread_id: str) -> None:
        """Drop the local read mark and flag every message of the thread unread."""
        self.overlay.mark_unread(thread_id)
        thread = self._find(thread_id)
        message_ids = [m.id for m in thread.messages] if thread else []
        self._schedule_read_flag_write(thread_id, message_ids, False)

    async def drain(self) -> None:
        """Wait for outstanding read-flag writes."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes)

    def _schedule_read_flag_write(
        self, thread_id: str, message_ids: list[str], is_read: bool
    ) -> None:
        if not message_ids:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "read_flag_write_skipped",
                thread_id=thread_id,
                reason="no running event loop",
            )
            return

        task = loop.create_task(self._write_read_flags(thread_id, message_ids, is_read))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write_read_flags(
        self, thread_id: str, message_ids: list[str], is_read: bool
    ) -> None:
        try:
            await self._store.update_message_read_flags(message_ids, is_read)
        except Exception as exc:  # noqa: BLE001
            # The overlay stays as the user left it.
            logger.warning(
                "read_flag_write_failed",
                thread_id=thread_id,
                message_count=len(message_ids),
                is_read=is_read,
                error=str(exc),
            )
            return
        logger.debug(
            "read_flag_written",
            thread_id=thread_id,
            message_count=len(message_ids),
            is_read=is_read,
        )

    # Thread actions

    async def archive_thread(self, thread_id: str) -> None:
        """Archive through the store, then refresh the snapshot."""
        await self._store.archive_thread(thread_id)
        await self.refresh()

    async def delete_thread(self, thread_id: str) -> None:
        """Trash through the store, then refresh the snapshot."""
        await self._store.delete_thread(thread_id)
        await self.refresh()

    def _find(self, thread_id: str) -> Thread | None:
        for thread in self._threads:
            if thread.id == thread_id:
                return thread
        return None
