"""Unit tests for the in-memory thread store."""

import json

import pytest

from inbox_search.exceptions import ThreadStoreError
from inbox_search.store import InMemoryThreadStore, ThreadStore


def test_store_satisfies_protocol() -> None:
    """Test that InMemoryThreadStore implements ThreadStore."""
    assert isinstance(InMemoryThreadStore(), ThreadStore)


@pytest.mark.asyncio
async def test_fetch_returns_copies(providencia_thread) -> None:
    """Test that fetched threads can be mutated without touching the store."""
    store = InMemoryThreadStore([providencia_thread])

    fetched = await store.fetch_threads("agent-1")
    fetched[0].labels.append("STARRED")

    again = await store.fetch_threads("agent-1")
    assert "STARRED" not in again[0].labels


@pytest.mark.asyncio
async def test_update_read_flags(providencia_thread) -> None:
    """Test that read flags are applied to the stored messages."""
    store = InMemoryThreadStore([providencia_thread])

    await store.update_message_read_flags(["t-prov-m1"], True)

    (thread,) = await store.fetch_threads("agent-1")
    assert all(m.is_read for m in thread.messages)


@pytest.mark.asyncio
async def test_archive_and_delete(providencia_thread) -> None:
    """Test that archive drops INBOX and delete adds TRASH once."""
    store = InMemoryThreadStore([providencia_thread])

    await store.archive_thread("t-prov")
    (archived,) = await store.fetch_threads("agent-1")
    assert "INBOX" not in archived.labels

    await store.delete_thread("t-prov")
    (deleted,) = await store.fetch_threads("agent-1")
    assert deleted.labels.count("TRASH") == 1


def test_from_json_file(tmp_path, providencia_thread) -> None:
    """Test that a JSON snapshot loads into the store."""
    path = tmp_path / "threads.json"
    path.write_text(json.dumps([providencia_thread.model_dump(mode="json")]), encoding="utf-8")

    store = InMemoryThreadStore.from_json_file(path)

    assert store._threads[0].subject == "Oferta Depto Providencia"


def test_from_json_file_missing(tmp_path) -> None:
    """Test that a missing snapshot raises ThreadStoreError."""
    with pytest.raises(ThreadStoreError):
        InMemoryThreadStore.from_json_file(tmp_path / "missing.json")


def test_from_json_file_invalid(tmp_path) -> None:
    """Test that an invalid snapshot raises ThreadStoreError."""
    path = tmp_path / "threads.json"
    path.write_text('[{"subject": "sin id"}]', encoding="utf-8")

    with pytest.raises(ThreadStoreError):
        InMemoryThreadStore.from_json_file(path)
