"""Unit tests for Gmail thread parsing helpers."""

from datetime import datetime, timezone

from inbox_search.gmail.parsing import message_to_model, thread_to_model


def test_thread_to_model_parses_basic_fields(sample_gmail_thread) -> None:
    """Test that thread_to_model builds subject, labels, messages and dates."""
    thread = thread_to_model(sample_gmail_thread)

    assert thread.id == "thread789"
    assert thread.subject == "Tasación Las Condes"
    assert thread.labels == ["INBOX", "SENT", "UNREAD", "STARRED"]
    assert [m.id for m in thread.messages] == ["msg1", "msg2"]
    assert thread.has_attachments is None
    assert thread.updated_at == datetime(2024, 3, 2, 12, tzinfo=timezone.utc)


def test_message_read_flag_follows_unread_label(sample_gmail_thread) -> None:
    """Test that a message is read unless it carries UNREAD."""
    first, second = thread_to_model(sample_gmail_thread).messages

    assert first.is_read is True
    assert second.is_read is False
    assert second.from_address == "María Soto <maria@example.com>"
    assert second.snippet == "Gracias, la reviso"


def test_date_header_fallback() -> None:
    """Test that the Date header is used when internalDate is missing."""
    message = message_to_model(
        {
            "id": "m",
            "payload": {"headers": [{"name": "Date", "value": "Fri, 01 Mar 2024 09:00:00 -0300"}]},
        }
    )

    assert message.received_at == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)


def test_missing_dates_and_headers() -> None:
    """Test that missing dates and headers become None and empty strings."""
    message = message_to_model({"id": "m", "internalDate": "not-a-number"})

    assert message.received_at is None
    assert message.from_address == ""


def test_attachments_detected_from_parts() -> None:
    """Test that a named nested part marks the thread as having attachments."""
    thread = thread_to_model(
        {
            "id": "t",
            "messages": [
                {
                    "id": "m",
                    "payload": {
                        "headers": [],
                        "parts": [
                            {"filename": "", "parts": [{"filename": "ficha.pdf"}]},
                        ],
                    },
                }
            ],
        }
    )

    assert thread.has_attachments is True


def test_no_attachments_when_parts_have_no_filenames() -> None:
    """Test that parts without filenames mean no attachments."""
    thread = thread_to_model(
        {"id": "t", "messages": [{"id": "m", "payload": {"parts": [{"filename": ""}]}}]}
    )

    assert thread.has_attachments is False


def test_empty_thread() -> None:
    """Test that a thread resource without messages parses to an empty thread."""
    thread = thread_to_model({"id": "t"})

    assert thread.messages == []
    assert thread.labels == []
    assert thread.subject == ""
