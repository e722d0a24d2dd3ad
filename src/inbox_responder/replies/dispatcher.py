"""Send replies threaded to the original message."""

from __future__ import annotations

from typing import Mapping, Sequence

import structlog

from inbox_responder.exceptions import (
    AuthenticationError,
    GmailAPIError,
    ReplyDispatchError,
    ValidationError,
)
from inbox_responder.gmail.client import GmailClient
from inbox_responder.gmail.encoding import build_envelope, encode_envelope, normalize_subject
from inbox_responder.models import Message, ReplyRequest, SendOutcome

logger = structlog.get_logger()

UNREAD_LABEL = "UNREAD"
STARRED_LABEL = "STARRED"


def reply_request_for(message: Message, body: str) -> ReplyRequest:
    """Build the send payload for answering ``message`` with ``body``."""
    return ReplyRequest(
        message_id=message.id,
        thread_id=message.thread_id,
        to=message.recipient_address(),
        subject=message.subject,
        body=body,
        message_header_id=message.message_id_header,
    )


class ReplyDispatcher:
    """Sends replies and marks the originals as handled."""

    def __init__(self, client: GmailClient) -> None:
        self.client = client

    async def send_reply(self, request: ReplyRequest) -> None:
        """Send one reply and mark the original read and starred.

        The label update is best effort: if it fails after the send went
        through, the failure is logged and the reply still counts as sent.

        Raises:
            ValidationError: If a required field is missing. Nothing is sent.
            AuthenticationError: If the credential is missing or rejected.
            ReplyDispatchError: If Gmail fails the send.
        """
        missing = request.missing_fields()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        raw = encode_envelope(
            build_envelope(
                to=request.to,
                subject=normalize_subject(request.subject),
                body=request.body,
                in_reply_to=request.message_header_id,
            )
        )

        await self.client.authenticate()
        try:
            await self.client.send_message(raw, thread_id=request.thread_id)
        except GmailAPIError as exc:
            raise ReplyDispatchError("Failed to send reply") from exc

        try:
            await self.client.modify_message(
                request.message_id,
                add_label_ids=[STARRED_LABEL],
                remove_label_ids=[UNREAD_LABEL],
            )
        except (AuthenticationError, GmailAPIError) as exc:
            # TODO: queue a reconciliation pass for messages sent but left unread.
            logger.warning("reply_label_update_failed", message_id=request.message_id, error=str(exc))

        logger.info("reply_sent", message_id=request.message_id, thread_id=request.thread_id)

    async def send(self, message: Message, body: str) -> SendOutcome:
        """Answer ``message`` and report the result instead of raising."""
        recipient = message.recipient_label()
        try:
            await self.send_reply(reply_request_for(message, body))
        except AuthenticationError:
            raise
        except (ValidationError, ReplyDispatchError) as exc:
            logger.warning("reply_failed", message_id=message.id, error=str(exc))
            return SendOutcome(message_id=message.id, ok=False, recipient=recipient, error=str(exc))
        return SendOutcome(message_id=message.id, ok=True, recipient=recipient)

    async def send_all(
        self,
        messages: Sequence[Message],
        drafts: Mapping[str, str],
    ) -> list[SendOutcome]:
        """Answer every message that has a non-blank draft, one at a time.

        A failed message does not stop the rest.
        """
        outcomes: list[SendOutcome] = []
        for message in messages:
            body = drafts.get(message.id) or ""
            if not body.strip():
                continue
            outcomes.append(await self.send(message, body))

        sent = sum(1 for o in outcomes if o.ok)
        logger.info("send_all_completed", attempted=len(outcomes), sent=sent)
        return outcomes
