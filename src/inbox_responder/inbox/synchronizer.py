"""Fetch and normalize the unread inbox."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from inbox_responder.config import Settings
from inbox_responder.exceptions import AuthenticationError, ConfigurationError, InboxSyncError
from inbox_responder.gmail.client import GmailClient
from inbox_responder.gmail.parsing import METADATA_HEADERS, message_to_inbox_message
from inbox_responder.models import Message

logger = structlog.get_logger()

UNREAD_QUERY = "is:unread"
INBOX_LABEL = "INBOX"


class InboxSynchronizer:
    """Load the current unread set from Gmail.

    Each call re-queries live state; nothing is cached between calls.
    """

    def __init__(self, client: GmailClient, settings: Settings | None = None) -> None:
        self.client = client
        self.settings = settings or client.settings

    async def fetch_unread(self) -> list[Message]:
        """Return unread inbox messages in the order Gmail listed them.

        Detail lookups run concurrently. A reference without an id is skipped;
        any failure aborts the whole fetch without partial results.

        Raises:
            AuthenticationError: If the credential is missing or rejected.
            ConfigurationError: If no local credentials are set up.
            InboxSyncError: For any other failure.
        """
        try:
            await self.client.authenticate()
            refs = await self.client.list_messages(
                query=UNREAD_QUERY,
                label_ids=[INBOX_LABEL],
                max_results=self.settings.gmail_max_results,
            )
            if not refs:
                logger.info("unread_fetch_completed", count=0)
                return []

            # gather preserves argument order regardless of completion order.
            detailed = await asyncio.gather(*(self._enrich(ref) for ref in refs))
        except (AuthenticationError, ConfigurationError):
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("unread_fetch_failed", error=str(exc))
            raise InboxSyncError("Failed to load messages") from exc

        messages = [m for m in detailed if m is not None]
        logger.info("unread_fetch_completed", count=len(messages), listed=len(refs))
        return messages

    async def _enrich(self, ref: dict[str, Any]) -> Message | None:
        message_id = ref.get("id")
        if not message_id:
            return None

        detail = await self.client.get_message(
            message_id,
            format="metadata",
            metadata_headers=list(METADATA_HEADERS),
        )
        return message_to_inbox_message(detail, message_id=message_id, thread_id=ref.get("threadId"))
