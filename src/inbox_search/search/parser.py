"""Turn search tokens into a ``ParsedQuery``.

Single-valued operators are last-wins; free-text terms accumulate. Nothing in
here raises for user input: unknown ``key:value`` tokens become text terms and
unparseable dates become bounds that never exclude anything.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import structlog

from inbox_search.models import DateBound, FolderFilter, ParsedQuery
from inbox_search.search.tokenizer import tokenize

logger = structlog.get_logger()

# in:<name> shortcuts; anything else is upper-cased and matched as a label.
FOLDER_ALIASES: dict[str, FolderFilter] = {
    "inbox": FolderFilter.named("INBOX"),
    "sent": FolderFilter.named("SENT"),
    "starred": FolderFilter.named("STARRED"),
    "trash": FolderFilter.named("TRASH"),
    "spam": FolderFilter.named("SPAM"),
    "archive": FolderFilter.archive(),
}

# Flag tokens, compared against the lowercased token.
_FLAGS: dict[str, tuple[str, bool]] = {
    "is:unread": ("is_unread", True),
    "is:read": ("is_unread", False),
    "is:starred": ("is_starred", True),
    "has:attachment": ("has_attachment", True),
}

_VALUE_OPERATORS: dict[str, str] = {
    "from:": "from_address",
    "to:": "to_address",
    "subject:": "subject",
}

_DATE_OPERATORS: dict[str, str] = {
    "after:": "after",
    "before:": "before",
}

_SHORT_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def _strip_quotes(value: str) -> str:
    return value.strip('"')


def parse_date_bound(value: str) -> DateBound:
    """Build a date bound from an ``after:``/``before:`` value.

    ``YYYY-M-D`` (slashes allowed) is read as midnight UTC; other ISO 8601
    forms are accepted too, naive ones taken as UTC. Anything else yields a
    bound with no value.
    """
    raw = _strip_quotes(value).replace("/", "-")
    parsed: datetime | None = None

    match = _SHORT_DATE_RE.match(raw)
    try:
        if match:
            year, month, day = (int(part) for part in match.groups())
            parsed = datetime(year, month, day, tzinfo=timezone.utc)
        elif raw:
            parsed = datetime.fromisoformat(raw)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
    except ValueError:
        parsed = None

    if parsed is None:
        logger.debug("date_bound_unparseable", value=raw)
    return DateBound(raw=raw, value=parsed)


def parse(tokens: Iterable[str]) -> ParsedQuery:
    """Build a ``ParsedQuery`` from tokens produced by ``tokenize``.

    Args:
        tokens: Tokens in input order.

    Returns:
        ParsedQuery: The structured query. An empty token sequence yields an
        empty query that matches everything.
    """

    fields: dict[str, Any] = {}
    text: list[str] = []

    for token in tokens:
        lowered = token.lower()

        flag = _FLAGS.get(lowered)
        if flag is not None:
            name, value = flag
            fields[name] = value
            continue

        key, sep, value = token.partition(":")
        operator = key.lower() + sep

        if operator in _VALUE_OPERATORS:
            cleaned = _strip_quotes(value).lower()
            if cleaned:
                fields[_VALUE_OPERATORS[operator]] = cleaned
            continue

        if operator in _DATE_OPERATORS:
            if _strip_quotes(value):
                fields[_DATE_OPERATORS[operator]] = parse_date_bound(value)
            continue

        if operator == "in:":
            folder = _strip_quotes(value)
            if folder:
                fields["in_folder"] = FOLDER_ALIASES.get(folder.lower()) or FolderFilter.named(
                    folder.upper()
                )
            continue

        term = _strip_quotes(token).lower()
        if term:
            text.append(term)

    return ParsedQuery(text=tuple(text), **fields)


def parse_query(raw: str) -> ParsedQuery:
    """Tokenize and parse ``raw`` in one step."""
    return parse(tokenize(raw))
