"""Thread and message models as delivered by a thread store.

Both models are read-only from the point of view of search: the store builds
them, search only reads them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Message(BaseModel):
    """A single message inside a thread."""

    id: str = Field(description="Message ID")
    from_address: str = Field(
        default="",
        description="Raw From value, may be 'Display Name <addr@example.com>'",
    )
    to_address: str = Field(default="", description="Raw To value")
    snippet: str = Field(default="", description="Short plain-text excerpt")
    received_at: datetime | None = Field(default=None, description="Reception timestamp")
    is_read: bool = Field(default=False, description="Server-side read flag")

    @field_validator("from_address", "to_address", "snippet", mode="before")
    @classmethod
    def _none_as_empty(cls, v: str | None) -> str:
        return "" if v is None else v


class Thread(BaseModel):
    """A conversation grouping one or more messages."""

    id: str = Field(description="Thread ID")
    subject: str = Field(default="", description="Thread subject")
    labels: list[str] = Field(default_factory=list, description="Provider labels")
    messages: list[Message] = Field(
        default_factory=list,
        description="Messages in store order",
    )
    contact_id: str | None = Field(default=None, description="Linked CRM contact ID")
    has_attachments: bool | None = Field(
        default=None,
        description="Whether any message carries attachments; None when unknown",
    )
    updated_at: datetime | None = Field(default=None, description="Last activity timestamp")

    @field_validator("labels", mode="before")
    @classmethod
    def _labels_never_null(cls, v: list[str] | None) -> list[str]:
        return [] if v is None else v

    @field_validator("subject", mode="before")
    @classmethod
    def _subject_never_null(cls, v: str | None) -> str:
        return "" if v is None else v

    def has_label(self, label: str) -> bool:
        """Return True when the thread carries ``label``."""
        return label in self.labels
