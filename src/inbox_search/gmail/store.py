"""Thread store backed by the Gmail API."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from inbox_search.gmail.client import GmailClient
from inbox_search.gmail.parsing import thread_to_model
from inbox_search.models import Thread

logger = structlog.get_logger()

_METADATA_HEADERS = ["Subject", "From", "To", "Date"]


class GmailThreadStore:
    """``ThreadStore`` implementation over a ``GmailClient``.

    Read flags map to the UNREAD label, archiving removes INBOX and deleting
    moves the thread to the trash.
    """

    def __init__(self, client: GmailClient, max_results: int | None = None) -> None:
        self._client = client
        if max_results is None:
            max_results = client.settings.gmail_max_results
        self._max_results = max_results

    async def fetch_threads(self, owner_id: str) -> list[Thread]:
        await self._client.authenticate()

        stubs = await self._client.list_threads(max_results=self._max_results, user_id=owner_id)
        with_attachments, attachments_complete = await self._threads_with_attachments(owner_id)

        threads: list[Thread] = []
        for stub in stubs:
            thread_id = stub.get("id")
            if not isinstance(thread_id, str) or not thread_id:
                continue
            raw = await self._client.get_thread(
                thread_id,
                format="metadata",
                metadata_headers=_METADATA_HEADERS,
                user_id=owner_id,
            )
            thread = thread_to_model(raw)
            if thread.has_attachments is None:
                if thread_id in with_attachments:
                    thread = thread.model_copy(update={"has_attachments": True})
                elif attachments_complete:
                    thread = thread.model_copy(update={"has_attachments": False})
            threads.append(thread)

        logger.info("gmail_threads_fetched", owner_id=owner_id, thread_count=len(threads))
        return threads

    async def _threads_with_attachments(self, owner_id: str) -> tuple[set[str], bool]:
        """Ids of threads Gmail reports as having attachments.

        The metadata format carries no MIME parts, so attachment presence comes
        from a separate ``has:attachment`` listing. The flag is False when that
        listing hit ``max_results`` and threads missing from it stay unknown.
        """
        stubs = await self._client.list_threads(
            max_results=self._max_results, query="has:attachment", user_id=owner_id
        )
        ids = {s["id"] for s in stubs if isinstance(s.get("id"), str) and s["id"]}
        complete = self._max_results is None or len(stubs) < self._max_results
        return ids, complete

    async def update_message_read_flags(self, message_ids: Sequence[str], is_read: bool) -> None:
        if is_read:
            await self._client.batch_modify_messages(message_ids, remove_labels=["UNREAD"])
        else:
            await self._client.batch_modify_messages(message_ids, add_labels=["UNREAD"])

    async def delete_thread(self, thread_id: str) -> None:
        await self._client.trash_thread(thread_id)

    async def archive_thread(self, thread_id: str) -> None:
        await self._client.modify_thread(thread_id, remove_labels=["INBOX"])
