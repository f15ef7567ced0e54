"""Structured search query models.

A ``ParsedQuery`` is a closed record with one field per supported operator.
Adding an operator means adding a field here, which the parser, evaluator and
chip builder then have to handle explicitly.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FolderKind(str, Enum):
    """Variants of an ``in:`` folder filter."""

    NAMED = "named"
    ARCHIVE = "archive"


class FolderFilter(BaseModel):
    """Folder restriction from an ``in:`` operator.

    ``NAMED`` requires the thread to carry ``label``. ``ARCHIVE`` requires the
    thread to carry neither INBOX nor TRASH. "No folder filter" is expressed by
    the query field being ``None``, never by this model.
    """

    model_config = ConfigDict(frozen=True)

    kind: FolderKind
    label: str | None = None

    @model_validator(mode="after")
    def _label_matches_kind(self) -> FolderFilter:
        if self.kind is FolderKind.NAMED and not self.label:
            raise ValueError("named folder filter requires a label")
        if self.kind is FolderKind.ARCHIVE and self.label is not None:
            raise ValueError("archive folder filter takes no label")
        return self

    @classmethod
    def named(cls, label: str) -> FolderFilter:
        return cls(kind=FolderKind.NAMED, label=label)

    @classmethod
    def archive(cls) -> FolderFilter:
        return cls(kind=FolderKind.ARCHIVE)

    @property
    def is_archive(self) -> bool:
        return self.kind is FolderKind.ARCHIVE


class DateBound(BaseModel):
    """A date bound from ``after:`` or ``before:``.

    ``value`` is None when ``raw`` could not be parsed; such a bound never
    excludes a thread.
    """

    model_config = ConfigDict(frozen=True)

    raw: str = Field(description="Value as typed, with '/' normalised to '-'")
    value: datetime | None = Field(default=None, description="Parsed UTC timestamp")

    @property
    def is_valid(self) -> bool:
        return self.value is not None


class ParsedQuery(BaseModel):
    """Immutable result of parsing a raw search string."""

    model_config = ConfigDict(frozen=True)

    text: tuple[str, ...] = Field(default=(), description="Lowercased free-text terms (AND)")
    from_address: str | None = Field(default=None, description="Sender substring")
    to_address: str | None = Field(default=None, description="Recipient substring")
    subject: str | None = Field(default=None, description="Subject substring")
    is_unread: bool | None = Field(default=None, description="Unread tri-state")
    is_starred: bool | None = Field(default=None, description="True or unset")
    has_attachment: bool | None = Field(default=None, description="True or unset")
    after: DateBound | None = Field(default=None, description="Lower date bound")
    before: DateBound | None = Field(default=None, description="Upper date bound")
    in_folder: FolderFilter | None = Field(default=None, description="Folder restriction")

    @property
    def is_empty(self) -> bool:
        """True when no filter is set; an empty query matches every thread."""
        return not self.text and all(
            getattr(self, name) is None for name in type(self).model_fields if name != "text"
        )


class ActiveChip(BaseModel):
    """A human-readable representation of one active query field."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
