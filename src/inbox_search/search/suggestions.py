"""Autocomplete entries and active filter chips for the search box."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from inbox_search.models import ActiveChip, ParsedQuery


@dataclass(frozen=True)
class OperatorSuggestion:
    """A catalog entry: the operator text and what it does."""

    label: str
    description: str

    @property
    def takes_value(self) -> bool:
        return self.label.endswith(":")


@dataclass(frozen=True)
class Suggestion:
    """A catalog entry offered for the current input."""

    entry: OperatorSuggestion
    active: bool

    @property
    def label(self) -> str:
        return self.entry.label


DEFAULT_CATALOG: tuple[OperatorSuggestion, ...] = (
    OperatorSuggestion("is:unread", "No leídos"),
    OperatorSuggestion("is:read", "Leídos"),
    OperatorSuggestion("is:starred", "Destacados"),
    OperatorSuggestion("has:attachment", "Con archivos adjuntos"),
    OperatorSuggestion("in:inbox", "En Recibidos"),
    OperatorSuggestion("in:sent", "En Enviados"),
    OperatorSuggestion("in:trash", "En la Papelera"),
    OperatorSuggestion("in:archive", "Archivados"),
    OperatorSuggestion("from:", "Remitente"),
    OperatorSuggestion("to:", "Destinatario"),
    OperatorSuggestion("subject:", "Asunto"),
    OperatorSuggestion("after:", "Después de (AAAA/MM/DD)"),
    OperatorSuggestion("before:", "Antes de (AAAA/MM/DD)"),
)

_WHITESPACE_RE = re.compile(r"\s+")


def current_token(raw: str) -> str:
    """Return the token being typed; empty after trailing whitespace."""
    if not raw or raw[-1].isspace():
        return ""
    return raw.split()[-1]


def suggestions(catalog: Sequence[OperatorSuggestion], raw: str) -> list[Suggestion]:
    """Return catalog entries applicable to ``raw``, in catalog order.

    Entries are kept when their label starts with the token being typed
    (case-insensitive); an empty token keeps the whole catalog. ``active``
    marks labels already present anywhere in the input.
    """
    token = current_token(raw).lower()
    return [
        Suggestion(entry=entry, active=entry.label in raw)
        for entry in catalog
        if entry.label.lower().startswith(token)
    ]


def _collapse(raw: str) -> str:
    return _WHITESPACE_RE.sub(" ", raw).strip()


def apply_suggestion(raw: str, label: str) -> str:
    """Return the input after picking the suggestion ``label``.

    Value operators (``from:``) are appended so the user can type the value;
    the input is left alone when it already ends with that operator. Flag
    operators (``is:unread``) toggle: the first occurrence is removed, or the
    label appended when absent.
    """
    if label.endswith(":"):
        if raw.rstrip().endswith(label):
            return _collapse(raw)
        return _collapse(f"{raw} {label}")

    if label in raw:
        return _collapse(raw.replace(label, "", 1))
    return _collapse(f"{raw} {label}")


_FOLDER_NAMES: dict[str, str] = {
    "INBOX": "recibidos",
    "SENT": "enviados",
    "STARRED": "destacados",
    "TRASH": "papelera",
    "SPAM": "spam",
}


def active_chips(query: ParsedQuery) -> list[ActiveChip]:
    """One chip per non-empty field of ``query``, in a fixed order."""
    chips: list[ActiveChip] = []

    if query.from_address:
        chips.append(ActiveChip(key="from", label=f"de: {query.from_address}"))
    if query.to_address:
        chips.append(ActiveChip(key="to", label=f"para: {query.to_address}"))
    if query.subject:
        chips.append(ActiveChip(key="subject", label=f"asunto: {query.subject}"))
    if query.is_unread is not None:
        chips.append(
            ActiveChip(key="is_unread", label="no leídos" if query.is_unread else "leídos")
        )
    if query.is_starred:
        chips.append(ActiveChip(key="is_starred", label="destacados"))
    if query.has_attachment:
        chips.append(ActiveChip(key="has_attachment", label="con adjuntos"))
    if query.after is not None:
        chips.append(ActiveChip(key="after", label=f"después de: {query.after.raw}"))
    if query.before is not None:
        chips.append(ActiveChip(key="before", label=f"antes de: {query.before.raw}"))
    if query.in_folder is not None:
        if query.in_folder.is_archive:
            name = "archivados"
        else:
            name = _FOLDER_NAMES.get(query.in_folder.label, query.in_folder.label.lower())
        chips.append(ActiveChip(key="in_folder", label=f"en: {name}"))
    if query.text:
        chips.append(ActiveChip(key="text", label=f"texto: {' '.join(query.text)}"))

    return chips
