"""Unit tests for the Gmail client and the Gmail-backed thread store."""

from collections.abc import Sequence
from typing import Any

import pytest

from inbox_search.exceptions import AuthenticationError, ConfigurationError
from inbox_search.gmail import GmailClient, GmailThreadStore
from inbox_search.search import matches, parse_query


class TestGmailClient:
    """Test suite for GmailClient class."""

    def test_gmail_client_initialization(self) -> None:
        """Test that Gmail client is properly initialized."""
        client = GmailClient()

        assert client.settings is not None
        assert client._service is None

    @pytest.mark.asyncio
    async def test_authenticate_missing_credentials_raises(self, mock_settings, tmp_path) -> None:
        """Test that authenticate fails fast when credentials.json is missing."""
        settings = mock_settings.model_copy(
            update={"gmail_credentials_path": tmp_path / "credentials.json"}
        )
        client = GmailClient(settings)

        with pytest.raises(ConfigurationError):
            await client.authenticate()

    @pytest.mark.asyncio
    async def test_list_threads_requires_authentication(self) -> None:
        """Test that list_threads requires authenticate() first."""
        client = GmailClient()

        with pytest.raises(AuthenticationError):
            await client.list_threads()

    @pytest.mark.asyncio
    async def test_get_thread_requires_authentication(self) -> None:
        """Test that get_thread requires authenticate() first."""
        client = GmailClient()

        with pytest.raises(AuthenticationError):
            await client.get_thread("thread123")

    @pytest.mark.asyncio
    async def test_batch_modify_requires_authentication(self) -> None:
        """Test that batch_modify_messages requires authenticate() first."""
        client = GmailClient()

        with pytest.raises(AuthenticationError):
            await client.batch_modify_messages(["m1"], remove_labels=["UNREAD"])


class FakeGmailClient:
    """Records calls instead of talking to Gmail."""

    def __init__(
        self,
        settings,
        threads: dict[str, dict[str, Any]],
        with_attachments: set[str] | None = None,
    ) -> None:
        self.settings = settings
        self._threads = threads
        self._with_attachments = with_attachments or set()
        self.calls: list[tuple[str, Any]] = []

    async def authenticate(self) -> None:
        self.calls.append(("authenticate", None))

    async def list_threads(self, max_results=None, query=None, *, user_id="me"):
        self.calls.append(("list_threads", (max_results, query, user_id)))
        if query == "has:attachment":
            stubs = [{"id": t} for t in self._threads if t in self._with_attachments]
        else:
            stubs = [{"id": thread_id} for thread_id in self._threads] + [{"snippet": "no id"}]
        return stubs if max_results is None else stubs[:max_results]

    async def get_thread(self, thread_id, *, format="metadata", metadata_headers=None, user_id="me"):
        self.calls.append(("get_thread", thread_id))
        return self._threads[thread_id]

    async def batch_modify_messages(
        self, message_ids: Sequence[str], *, add_labels=(), remove_labels=(), user_id="me"
    ):
        self.calls.append(("batch_modify", (list(message_ids), list(add_labels), list(remove_labels))))

    async def modify_thread(self, thread_id, *, add_labels=(), remove_labels=(), user_id="me"):
        self.calls.append(("modify_thread", (thread_id, list(remove_labels))))

    async def trash_thread(self, thread_id, *, user_id="me"):
        self.calls.append(("trash_thread", thread_id))


class TestGmailThreadStore:
    """Test suite for GmailThreadStore."""

    @pytest.mark.asyncio
    async def test_fetch_threads(self, mock_settings, sample_gmail_thread) -> None:
        """Test that fetch_threads lists, fetches and converts threads."""
        client = FakeGmailClient(mock_settings, {"thread789": sample_gmail_thread})
        store = GmailThreadStore(client, max_results=10)

        threads = await store.fetch_threads("me")

        assert [t.id for t in threads] == ["thread789"]
        assert ("list_threads", (10, None, "me")) in client.calls

    @pytest.mark.asyncio
    async def test_fetch_threads_marks_attachments_from_listing(
        self, mock_settings, sample_gmail_thread
    ) -> None:
        """Test that has:attachment listing sets the flag the metadata format lacks."""
        other = {**sample_gmail_thread, "id": "thread790"}
        client = FakeGmailClient(
            mock_settings,
            {"thread789": sample_gmail_thread, "thread790": other},
            with_attachments={"thread789"},
        )
        store = GmailThreadStore(client, max_results=10)

        threads = {t.id: t for t in await store.fetch_threads("me")}

        assert threads["thread789"].has_attachments is True
        assert threads["thread790"].has_attachments is False
        assert ("list_threads", (10, "has:attachment", "me")) in client.calls

    @pytest.mark.asyncio
    async def test_unknown_attachments_pass_has_attachment(
        self, mock_settings, sample_gmail_thread
    ) -> None:
        """Test that a thread outside a capped listing is not excluded by has:attachment."""
        threads = {f"thread{i}": {**sample_gmail_thread, "id": f"thread{i}"} for i in range(2)}
        client = FakeGmailClient(mock_settings, threads, with_attachments={"thread1"})
        store = GmailThreadStore(client, max_results=1)

        (thread,) = await store.fetch_threads("me")

        assert thread.id == "thread0"
        assert thread.has_attachments is None
        assert matches(thread, parse_query("has:attachment"))


    @pytest.mark.asyncio
    async def test_read_flags_map_to_unread_label(self, mock_settings) -> None:
        """Test that read flags are written as UNREAD label changes."""
        client = FakeGmailClient(mock_settings, {})
        store = GmailThreadStore(client)

        await store.update_message_read_flags(["m1", "m2"], True)
        await store.update_message_read_flags(["m1"], False)

        assert client.calls == [
            ("batch_modify", (["m1", "m2"], [], ["UNREAD"])),
            ("batch_modify", (["m1"], ["UNREAD"], [])),
        ]

    @pytest.mark.asyncio
    async def test_archive_and_delete(self, mock_settings) -> None:
        """Test that archive removes INBOX and delete trashes the thread."""
        client = FakeGmailClient(mock_settings, {})
        store = GmailThreadStore(client)

        await store.archive_thread("t1")
        await store.delete_thread("t2")

        assert client.calls == [("modify_thread", ("t1", ["INBOX"])), ("trash_thread", "t2")]
