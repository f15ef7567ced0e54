"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from inbox_search.models import Message, Thread


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from inbox_search.config import Settings

    return Settings(
        page_size=20,
        poll_interval_seconds=0.01,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def make_thread():
    """Build threads tersely: one message per (from, snippet, day, is_read) tuple."""

    def _make(
        thread_id: str,
        subject: str = "",
        labels: list[str] | None = None,
        messages: list[tuple[str, str, int | None, bool]] | None = None,
        **extra,
    ) -> Thread:
        built = [
            Message(
                id=f"{thread_id}-m{i}",
                from_address=from_address,
                to_address="agente@remax-exclusive.cl",
                snippet=snippet,
                received_at=None if day is None else datetime(2024, 3, day, 12, tzinfo=timezone.utc),
                is_read=is_read,
            )
            for i, (from_address, snippet, day, is_read) in enumerate(messages or [])
        ]
        return Thread(id=thread_id, subject=subject, labels=labels or [], messages=built, **extra)

    return _make


@pytest.fixture
def providencia_thread(make_thread) -> Thread:
    """A property inquiry thread whose latest message is from Juan."""
    return make_thread(
        "t-prov",
        subject="Oferta Depto Providencia",
        labels=["INBOX", "UNREAD"],
        messages=[
            ("Agente <agente@remax-exclusive.cl>", "Le envío la ficha", 1, True),
            ("Juan Pérez <juan@x.cl>", "Me interesa visitar el sábado", 3, False),
        ],
    )


@pytest.fixture
def sample_gmail_thread() -> dict:
    """Provide a Gmail API thread resource (format=metadata)."""
    return {
        "id": "thread789",
        "historyId": "1234",
        "messages": [
            {
                "id": "msg1",
                "threadId": "thread789",
                "labelIds": ["INBOX", "SENT"],
                "snippet": "Adjunto la tasación",
                "internalDate": "1709294400000",
                "payload": {
                    "headers": [
                        {"name": "Subject", "value": "Tasación Las Condes"},
                        {"name": "From", "value": "Agente <agente@remax-exclusive.cl>"},
                        {"name": "To", "value": "maria@example.com"},
                    ],
                },
            },
            {
                "id": "msg2",
                "threadId": "thread789",
                "labelIds": ["INBOX", "UNREAD", "STARRED"],
                "snippet": "Gracias, la reviso",
                "internalDate": "1709380800000",
                "payload": {
                    "headers": [
                        {"name": "Subject", "value": "Re: Tasación Las Condes"},
                        {"name": "From", "value": "María Soto <maria@example.com>"},
                        {"name": "To", "value": "agente@remax-exclusive.cl"},
                    ],
                },
            },
        ],
    }
