"""Mailbox buckets used when browsing without a search."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from inbox_search.models import Thread


class Bucket(str, Enum):
    """Sidebar folders, in display order."""

    INBOX = "inbox"
    STARRED = "starred"
    SENT = "sent"
    DRAFTS = "drafts"
    TRASHED = "trashed"
    ARCHIVED = "archived"


_REQUIRED_LABEL: dict[Bucket, str] = {
    Bucket.INBOX: "INBOX",
    Bucket.STARRED: "STARRED",
    Bucket.SENT: "SENT",
    Bucket.DRAFTS: "DRAFT",
    Bucket.TRASHED: "TRASH",
}

# Archived means "left the inbox without being trashed or still a draft".
_ARCHIVE_EXCLUDED = frozenset({"INBOX", "TRASH", "DRAFT"})


def in_bucket(thread: Thread, bucket: Bucket) -> bool:
    """Return True when ``thread`` is listed under ``bucket``.

    A thread can be listed under several tabs (an inbox thread that is also
    starred shows under both).
    """
    if bucket is Bucket.ARCHIVED:
        return _ARCHIVE_EXCLUDED.isdisjoint(thread.labels)
    return _REQUIRED_LABEL[bucket] in thread.labels


def classify(thread: Thread) -> Bucket:
    """Return the single primary bucket of ``thread``.

    The first bucket in display order that the thread belongs to wins. The
    function is total: a thread with no recognized labels is archived.
    """
    for bucket in Bucket:
        if in_bucket(thread, bucket):
            return bucket
    # Every label set lands in one of the buckets above.
    return Bucket.ARCHIVED


def bucket_counts(threads: Iterable[Thread]) -> dict[Bucket, int]:
    """Count threads listed under each bucket."""
    counts = {bucket: 0 for bucket in Bucket}
    for thread in threads:
        for bucket in Bucket:
            if in_bucket(thread, bucket):
                counts[bucket] += 1
    return counts
