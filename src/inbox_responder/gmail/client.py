"""Gmail API client implementation.

This module provides the mailbox adapter used by the synchronizer and the
reply dispatcher: list unread ids, fetch metadata, send a raw message and
modify labels.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, TypeVar

import structlog

from inbox_responder.config import Settings
from inbox_responder.exceptions import AuthenticationError, ConfigurationError, GmailAPIError
from inbox_responder.session import SessionContext

logger = structlog.get_logger()

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Gmail answers 401 for a revoked or expired token.
CREDENTIAL_ERROR_STATUSES = frozenset({401})

# 403 is shared by scope problems and quota limits; only these reasons mean
# the credential itself is unusable.
CREDENTIAL_ERROR_REASONS = frozenset(
    {
        "authError",
        "insufficientPermissions",
        "ACCESS_TOKEN_SCOPE_INSUFFICIENT",
    }
)

T = TypeVar("T")


def _http_error_reasons(exc: Any) -> set[str]:
    """Collect the ``reason`` values from a Google API error body."""
    try:
        payload = json.loads(exc.content)
    except (TypeError, ValueError):
        return set()
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return set()

    reasons: set[str] = set()
    for key in ("errors", "details"):
        for item in error.get(key) or []:
            if isinstance(item, dict) and item.get("reason"):
                reasons.add(item["reason"])
    return reasons


def is_credential_error(exc: BaseException) -> bool:
    """Whether ``exc`` means the credential is unusable rather than the data call failed."""
    from google.auth.exceptions import RefreshError
    from googleapiclient.errors import HttpError

    if isinstance(exc, RefreshError):
        return True
    if not isinstance(exc, HttpError):
        return False

    status = getattr(exc.resp, "status", None)
    if status in CREDENTIAL_ERROR_STATUSES:
        return True
    if status == 403:
        return bool(_http_error_reasons(exc) & CREDENTIAL_ERROR_REASONS)
    return False


class GmailClient:
    """Gmail API client for mailbox operations.

    With a session the client acts on behalf of the signed-in web user;
    without one it falls back to the local installed-app token files.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session: SessionContext | None = None,
    ) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
            session: Credentials of the signed-in user, if any.
        """
        from inbox_responder.config import get_settings

        self.settings = settings or get_settings()
        self.session = session
        self._service: Any | None = None
        logger.debug("gmail_client_initialized", session_bound=session is not None)

    @property
    def user_id(self) -> str:
        return self.settings.gmail_user_id

    async def authenticate(self) -> None:
        """Build the Gmail service from the session or the local token files.

        Raises:
            AuthenticationError: If no usable credential is available.
            ConfigurationError: If the local credentials file is missing.
        """

        if self._service is not None:
            return

        if self.session is not None:
            if not self.session.is_authenticated:
                raise AuthenticationError("No signed-in mailbox session")
            try:
                self._service = await asyncio.to_thread(self._build_session_service, self.session)
            except Exception as exc:  # noqa: BLE001
                logger.exception("gmail_authentication_failed", error=str(exc))
                raise AuthenticationError(str(exc)) from exc
            return

        credentials_path = Path(self.settings.gmail_credentials_path)
        token_path = Path(self.settings.gmail_token_path)
        scopes = list(self.settings.gmail_scopes)

        if not credentials_path.exists() and not token_path.exists():
            raise ConfigurationError(
                f"Gmail credentials file not found: {credentials_path}. "
                "Download an OAuth client secret for a desktop app first."
            )

        logger.info(
            "gmail_authentication_started",
            credentials_path=str(credentials_path),
            token_path=str(token_path),
            scopes=scopes,
        )

        try:
            self._service = await asyncio.to_thread(
                self._build_file_service,
                credentials_path,
                token_path,
                scopes,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def list_messages(
        self,
        *,
        query: str | None = None,
        label_ids: list[str] | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """List message references (``{id, threadId}``) from Gmail.

        Args:
            query: Gmail search query string.
            label_ids: Only return messages carrying all of these labels.
            max_results: Maximum number of messages to return.

        Raises:
            AuthenticationError: If the credential is missing or rejected.
            GmailAPIError: If the API request fails.
        """

        logger.info("listing_messages", query=query, label_ids=label_ids, max_results=max_results)

        def call() -> dict[str, Any]:
            return (
                self._require_service()
                .users()
                .messages()
                .list(userId=self.user_id, labelIds=label_ids, q=query, maxResults=max_results)
                .execute()
            )

        response = await self._execute("list_messages", call)
        return list(response.get("messages") or [])

    async def get_message(
        self,
        message_id: str,
        *,
        format: str = "metadata",
        metadata_headers: list[str] | None = None,
    ) -> dict[str, Any]:
        """Get a specific message by ID.

        Args:
            message_id: The Gmail message ID.
            format: Gmail response format.
            metadata_headers: Headers to include when ``format`` is metadata.

        Returns:
            Message data dictionary.
        """

        logger.debug("getting_message", message_id=message_id, format=format)

        def call() -> dict[str, Any]:
            return (
                self._require_service()
                .users()
                .messages()
                .get(
                    userId=self.user_id,
                    id=message_id,
                    format=format,
                    metadataHeaders=metadata_headers,
                )
                .execute()
            )

        return await self._execute("get_message", call, message_id=message_id)

    async def send_message(self, raw: str, *, thread_id: str | None = None) -> dict[str, Any]:
        """Send an already encoded RFC 2822 message, optionally within a thread."""

        body: dict[str, Any] = {"raw": raw}
        if thread_id:
            body["threadId"] = thread_id

        logger.info("sending_message", thread_id=thread_id)

        def call() -> dict[str, Any]:
            return (
                self._require_service()
                .users()
                .messages()
                .send(userId=self.user_id, body=body)
                .execute()
            )

        return await self._execute("send_message", call, thread_id=thread_id)

    async def modify_message(
        self,
        message_id: str,
        *,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """Add and remove labels on a message."""

        body = {
            "addLabelIds": add_label_ids or [],
            "removeLabelIds": remove_label_ids or [],
        }

        logger.info("modifying_message", message_id=message_id, **body)

        def call() -> dict[str, Any]:
            return (
                self._require_service()
                .users()
                .messages()
                .modify(userId=self.user_id, id=message_id, body=body)
                .execute()
            )

        return await self._execute("modify_message", call, message_id=message_id)

    async def _execute(self, operation: str, call: Callable[[], T], **context: Any) -> T:
        self._require_service()
        try:
            return await asyncio.to_thread(call)
        except Exception as exc:  # noqa: BLE001
            if is_credential_error(exc):
                logger.warning(f"gmail_{operation}_unauthorized", error=str(exc), **context)
                raise AuthenticationError(str(exc)) from exc
            logger.exception(f"gmail_{operation}_failed", error=str(exc), **context)
            raise GmailAPIError(str(exc)) from exc

    def _require_service(self) -> Any:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )
        return self._service

    def _build_session_service(self, session: SessionContext) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from google.oauth2.credentials import Credentials
        from googleapiclient.discovery import build

        creds = Credentials(
            token=session.access_token,
            refresh_token=session.refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=self.settings.google_client_id,
            client_secret=self.settings.google_client_secret,
            scopes=list(self.settings.gmail_scopes),
        )
        return build("gmail", "v1", credentials=creds, cache_discovery=False)

    def _build_file_service(self, credentials_path: Path, token_path: Path, scopes: list[str]) -> Any:
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow
        from googleapiclient.discovery import build

        creds: Credentials | None = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes=scopes)

        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=scopes)
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")

        # cache_discovery=False prevents writing discovery docs to disk.
        return build("gmail", "v1", credentials=creds, cache_discovery=False)
