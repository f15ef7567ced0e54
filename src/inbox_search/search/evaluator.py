"""Decide whether a thread matches a parsed query.

``matches`` is a pure function of ``(thread, query, overlay)``. The overlay is
any container of thread IDs the user opened in this session; it only ever
affects the derived unread flag.
"""

from __future__ import annotations

from collections.abc import Container, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from inbox_search.models import Message, ParsedQuery, Thread
from inbox_search.search.folders import Bucket, in_bucket
from inbox_search.search.parser import parse_query


@dataclass(frozen=True)
class ThreadFacts:
    """Per-thread values the predicate compares against, all lowercased."""

    latest: Message | None
    from_address: str
    to_address: str
    subject: str
    snippet: str
    is_unread: bool
    date: datetime | None


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def latest_message(thread: Thread) -> Message | None:
    """Return the most recently received message of ``thread``.

    Dated messages beat undated ones. Among equal timestamps the one appearing
    last in the thread wins, so the choice is stable across refreshes.
    """
    best: Message | None = None
    best_key: tuple[bool, datetime] | None = None
    floor = datetime.min.replace(tzinfo=timezone.utc)

    for message in thread.messages:
        received = _as_utc(message.received_at)
        key = (received is not None, received or floor)
        if best_key is None or key >= best_key:
            best, best_key = message, key
    return best


def derive_facts(thread: Thread, overlay: Container[str]) -> ThreadFacts:
    """Compute the values ``matches`` needs for ``thread``."""
    latest = latest_message(thread)
    is_unread = thread.id not in overlay and any(not m.is_read for m in thread.messages)

    return ThreadFacts(
        latest=latest,
        from_address=latest.from_address.lower() if latest else "",
        to_address=latest.to_address.lower() if latest else "",
        subject=thread.subject.lower(),
        snippet=latest.snippet.lower() if latest else "",
        is_unread=is_unread,
        date=_as_utc(latest.received_at) if latest else None,
    )


def matches(thread: Thread, query: ParsedQuery, overlay: Container[str] = frozenset()) -> bool:
    """Return True when ``thread`` satisfies every filter set in ``query``.

    Unset fields are ignored. Date bounds only apply when both the bound and
    the thread's latest date are known; undated threads pass them.
    """

    if query.is_empty:
        return True

    facts = derive_facts(thread, overlay)

    if query.from_address is not None and query.from_address not in facts.from_address:
        return False
    if query.to_address is not None and query.to_address not in facts.to_address:
        return False
    if query.subject is not None and query.subject not in facts.subject:
        return False
    if query.is_unread is not None and query.is_unread != facts.is_unread:
        return False
    if query.is_starred and not thread.has_label("STARRED"):
        return False
    if query.has_attachment and thread.has_attachments is False:
        return False

    if facts.date is not None:
        if query.after is not None and query.after.is_valid and facts.date < query.after.value:
            return False
        if query.before is not None and query.before.is_valid and facts.date > query.before.value:
            return False

    folder = query.in_folder
    if folder is not None:
        if folder.is_archive:
            if thread.has_label("INBOX") or thread.has_label("TRASH"):
                return False
        elif not thread.has_label(folder.label):
            return False

    haystacks = (facts.subject, facts.from_address, facts.snippet)
    for term in query.text:
        if not any(term in field for field in haystacks):
            return False

    return True


def is_search_active(raw: str) -> bool:
    """A blank search box means folder browsing."""
    return bool(raw.strip())


def select_threads(
    threads: Iterable[Thread],
    raw: str,
    folder: Bucket,
    overlay: Container[str] = frozenset(),
) -> list[Thread]:
    """Apply the browse/search mode switch and return matching threads in order.

    With a search active every thread is a candidate whatever tab is open.
    Without one, the open tab's bucket decides.
    """
    if not is_search_active(raw):
        return [t for t in threads if in_bucket(t, folder)]

    query = parse_query(raw)
    return [t for t in threads if matches(t, query, overlay)]
