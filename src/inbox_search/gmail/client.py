"""Gmail API client implementation.

This module provides a thread-oriented client for the Gmail API.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the inbox session can keep polling on one event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog

from inbox_search.config import Settings
from inbox_search.exceptions import AuthenticationError, ConfigurationError, GmailAPIError
from inbox_search.utils import retry_on_failure

logger = structlog.get_logger()

# Gmail rejects batchModify requests with more than 1000 IDs.
_BATCH_MODIFY_LIMIT = 1000


class GmailClient:
    """Gmail API client for thread operations.

    This client handles authentication, thread retrieval
    and label changes (read flags, archive, trash).
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
        """
        from inbox_search.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = None

        # Reads are idempotent and retried; label changes are not.
        retry = retry_on_failure(max_retries=self.settings.max_retries, delay=0.5)
        self._list_threads_sync = retry(self._list_threads_sync)
        self._get_thread_sync = retry(self._get_thread_sync)
        logger.info("gmail_client_initialized")

    async def authenticate(self) -> None:
        """Authenticate with Gmail API using OAuth2.

        Raises:
            ConfigurationError: If the credentials file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        credentials_path = Path(self.settings.gmail_credentials_path)
        token_path = Path(self.settings.gmail_token_path)
        scope = self.settings.gmail_scope

        if not credentials_path.exists():
            raise ConfigurationError(
                f"Gmail credentials file not found: {credentials_path}. "
                "See README.md -> Gmail API Setup."
            )

        logger.info(
            "gmail_authentication_started",
            credentials_path=str(credentials_path),
            token_path=str(token_path),
            scope=scope,
        )

        try:
            self._service = await asyncio.to_thread(
                self._build_service,
                credentials_path,
                token_path,
                scope,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def list_threads(
        self,
        max_results: int | None = None,
        query: str | None = None,
        *,
        user_id: str = "me",
    ) -> list[dict[str, Any]]:
        """List thread stubs (``id``, ``snippet``) from Gmail, newest first.

        Args:
            max_results: Maximum number of threads to return.
            query: Gmail search query string.
            user_id: Mailbox owner.

        Returns:
            List of thread stub dictionaries.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        logger.info(
            "listing_threads",
            max_results="all" if max_results is None else max_results,
            query=query,
        )

        try:
            return await asyncio.to_thread(self._list_threads_sync, user_id, max_results, query)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_list_threads_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def get_thread(
        self,
        thread_id: str,
        *,
        format: str = "metadata",
        metadata_headers: list[str] | None = None,
        user_id: str = "me",
    ) -> dict[str, Any]:
        """Get a thread with its messages.

        Args:
            thread_id: The Gmail thread ID.

        Returns:
            Thread resource dictionary.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        logger.debug("getting_thread", thread_id=thread_id, format=format)

        try:
            return await asyncio.to_thread(
                self._get_thread_sync,
                user_id,
                thread_id,
                format,
                metadata_headers,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_thread_failed", thread_id=thread_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def batch_modify_messages(
        self,
        message_ids: Sequence[str],
        *,
        add_labels: Sequence[str] = (),
        remove_labels: Sequence[str] = (),
        user_id: str = "me",
    ) -> None:
        """Add/remove labels on many messages. Not retried.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        if not message_ids:
            return

        logger.info(
            "modifying_messages",
            message_count=len(message_ids),
            add_labels=list(add_labels),
            remove_labels=list(remove_labels),
        )

        try:
            await asyncio.to_thread(
                self._batch_modify_sync,
                user_id,
                list(message_ids),
                list(add_labels),
                list(remove_labels),
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_batch_modify_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def modify_thread(
        self,
        thread_id: str,
        *,
        add_labels: Sequence[str] = (),
        remove_labels: Sequence[str] = (),
        user_id: str = "me",
    ) -> None:
        """Add/remove labels on every message of a thread.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        logger.info(
            "modifying_thread",
            thread_id=thread_id,
            add_labels=list(add_labels),
            remove_labels=list(remove_labels),
        )

        body = {"addLabelIds": list(add_labels), "removeLabelIds": list(remove_labels)}
        try:
            request = self._threads().modify(userId=user_id, id=thread_id, body=body)
            await asyncio.to_thread(self._execute, request)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_modify_thread_failed", thread_id=thread_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def trash_thread(self, thread_id: str, *, user_id: str = "me") -> None:
        """Move a thread to the trash.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        logger.info("trashing_thread", thread_id=thread_id)

        try:
            request = self._threads().trash(userId=user_id, id=thread_id)
            await asyncio.to_thread(self._execute, request)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_trash_thread_failed", thread_id=thread_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def _ensure_authenticated(self) -> None:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )

    def _build_service(self, credentials_path: Path, token_path: Path, scope: str) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow
        from googleapiclient.discovery import build

        creds: Credentials | None = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes=[scope])

        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=[scope])
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")

        # cache_discovery=False prevents writing discovery docs to disk.
        return build("gmail", "v1", credentials=creds, cache_discovery=False)

    def _threads(self) -> Any:
        assert self._service is not None
        return self._service.users().threads()

    @staticmethod
    def _execute(request: Any) -> Any:
        return request.execute()

    def _list_threads_sync(
        self, user_id: str, max_results: int | None, query: str | None
    ) -> list[dict[str, Any]]:
        threads: list[dict[str, Any]] = []

        page_token: str | None = None
        while True:
            if max_results is not None and len(threads) >= max_results:
                break

            remaining = None if max_results is None else max_results - len(threads)
            per_page = 500 if remaining is None else min(500, remaining)

            request = self._threads().list(
                userId=user_id, maxResults=per_page, q=query, pageToken=page_token
            )
            response = request.execute()
            threads.extend(response.get("threads", []) or [])
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return threads if max_results is None else threads[:max_results]

    def _get_thread_sync(
        self,
        user_id: str,
        thread_id: str,
        format: str,
        metadata_headers: list[str] | None,
    ) -> dict[str, Any]:
        request = self._threads().get(
            userId=user_id, id=thread_id, format=format, metadataHeaders=metadata_headers
        )
        return request.execute()

    def _batch_modify_sync(
        self,
        user_id: str,
        message_ids: list[str],
        add_labels: list[str],
        remove_labels: list[str],
    ) -> None:
        assert self._service is not None
        for i in range(0, len(message_ids), _BATCH_MODIFY_LIMIT):
            body: dict[str, Any] = {"ids": message_ids[i : i + _BATCH_MODIFY_LIMIT]}
            if add_labels:
                body["addLabelIds"] = add_labels
            if remove_labels:
                body["removeLabelIds"] = remove_labels
            self._service.users().messages().batchModify(userId=user_id, body=body).execute()
