"""Helpers for parsing Gmail thread resources into internal models."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from inbox_search.models import Message, Thread


def _header_map(message: dict[str, Any]) -> dict[str, str]:
    payload = message.get("payload") or {}
    headers = payload.get("headers") or []
    result: dict[str, str] = {}
    for h in headers:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first for now.
            result.setdefault(name.lower(), value)
    return result


def _label_ids(message: dict[str, Any]) -> list[str]:
    label_ids = message.get("labelIds") or []
    if not isinstance(label_ids, list):
        return []
    return [x for x in label_ids if isinstance(x, str)]


def _received_at(message: dict[str, Any], date_header: str | None) -> datetime | None:
    internal_date_raw = message.get("internalDate")
    try:
        if internal_date_raw is not None:
            return datetime.fromtimestamp(int(internal_date_raw) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        pass

    if not date_header:
        return None
    try:
        parsed = parsedate_to_datetime(date_header)
    except (TypeError, ValueError, OverflowError):
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _has_attachments(message: dict[str, Any]) -> bool | None:
    """Walk the MIME tree; None when the payload carries no parts (metadata format)."""
    payload = message.get("payload") or {}
    if "parts" not in payload:
        return None

    stack = list(payload.get("parts") or [])
    while stack:
        part = stack.pop()
        if part.get("filename"):
            return True
        stack.extend(part.get("parts") or [])
    return False


def message_to_model(message: dict[str, Any]) -> Message:
    """Convert a Gmail API message (format=metadata or full) to ``Message``."""

    hm = _header_map(message)

    return Message(
        id=str(message.get("id") or ""),
        from_address=hm.get("from") or "",
        to_address=hm.get("to") or "",
        snippet=message.get("snippet") or "",
        received_at=_received_at(message, hm.get("date")),
        is_read="UNREAD" not in _label_ids(message),
    )


def thread_to_model(thread: dict[str, Any]) -> Thread:
    """Convert a Gmail API thread resource to ``Thread``.

    The thread's labels are the union of its messages' labels, the subject is
    taken from the first message, and attachment presence is only known when
    the messages were fetched with their MIME parts.

    Args:
        thread: Gmail API thread dict.

    Returns:
        Thread: Parsed thread model.
    """

    raw_messages = [m for m in thread.get("messages") or [] if isinstance(m, dict)]

    labels: list[str] = []
    for raw in raw_messages:
        for label in _label_ids(raw):
            if label not in labels:
                labels.append(label)

    attachment_flags = [_has_attachments(raw) for raw in raw_messages]
    has_attachments: bool | None
    if any(flag is True for flag in attachment_flags):
        has_attachments = True
    elif attachment_flags and all(flag is False for flag in attachment_flags):
        has_attachments = False
    else:
        has_attachments = None

    messages = [message_to_model(raw) for raw in raw_messages]
    subject = _header_map(raw_messages[0]).get("subject", "") if raw_messages else ""
    dates = [m.received_at for m in messages if m.received_at is not None]

    return Thread(
        id=str(thread.get("id") or ""),
        subject=subject,
        labels=labels,
        messages=messages,
        has_attachments=has_attachments,
        updated_at=max(dates) if dates else None,
    )
