"""Client-visible inbox state: the unread list, reply drafts and notices.

The workspace is what a front end renders. It owns the draft for every
visible message and is the only place messages leave the unread view.
"""

from __future__ import annotations

import structlog

from inbox_responder.exceptions import AuthenticationError, InboxResponderError
from inbox_responder.inbox.cancellation import CancellationToken
from inbox_responder.inbox.synchronizer import InboxSynchronizer
from inbox_responder.models import Message, SendOutcome
from inbox_responder.replies.dispatcher import ReplyDispatcher
from inbox_responder.replies.templates import default_reply, render_template, smart_reply

logger = structlog.get_logger()

SEND_IN_PROGRESS = "Another reply is being sent"


class InboxWorkspace:
    """Unread messages and their drafts for one signed-in session."""

    def __init__(self, synchronizer: InboxSynchronizer, dispatcher: ReplyDispatcher) -> None:
        self.synchronizer = synchronizer
        self.dispatcher = dispatcher
        self.messages: list[Message] = []
        self.drafts: dict[str, str] = {}
        self.loading = False
        self.sending_id: str | None = None
        self.error: str | None = None
        self.success: str | None = None
        # Set when the credential was rejected; the user needs to sign in again.
        self.needs_reauth = False

    @property
    def can_send(self) -> bool:
        return any(body.strip() for body in self.drafts.values())

    def get_message(self, message_id: str) -> Message:
        for message in self.messages:
            if message.id == message_id:
                return message
        raise KeyError(message_id)

    async def refresh(self, cancel_token: CancellationToken | None = None) -> bool:
        """Reload the unread set and seed every draft with the default template.

        Results are discarded if ``cancel_token`` was cancelled while the
        fetch was in flight. Returns whether new state was applied.
        """
        token = cancel_token or CancellationToken()
        self.loading = True
        self.error = None
        try:
            messages = await self.synchronizer.fetch_unread()
        except AuthenticationError as exc:
            if not token.cancelled:
                self.needs_reauth = True
                self.error = str(exc) or "Unauthorized"
            return False
        except InboxResponderError as exc:
            if not token.cancelled:
                self.error = str(exc) or "Failed to load messages"
            return False
        finally:
            if not token.cancelled:
                self.loading = False

        if token.cancelled:
            logger.info("refresh_discarded", count=len(messages))
            return False

        self.messages = messages
        # Fresh mapping: drafts of messages no longer listed are not carried over.
        self.drafts = {m.id: default_reply(m) for m in messages}
        self.needs_reauth = False
        return True

    def apply_template(self, message_id: str, template_id: str) -> str:
        body = render_template(template_id, self.get_message(message_id))
        self.drafts[message_id] = body
        return body

    def apply_smart_draft(self, message_id: str) -> str:
        body = smart_reply(self.get_message(message_id))
        self.drafts[message_id] = body
        return body

    def edit_draft(self, message_id: str, body: str) -> None:
        self.get_message(message_id)
        self.drafts[message_id] = body

    async def send_reply(self, message_id: str) -> SendOutcome:
        """Send the current draft for one message.

        Only one reply is in flight at a time; a call made while another send
        is running is refused without touching the workspace. On success the
        message and its draft leave the workspace and a confirmation naming
        the recipient is set.
        """
        if self.sending_id is not None:
            logger.info("reply_send_refused", message_id=message_id, sending_id=self.sending_id)
            return SendOutcome(message_id=message_id, ok=False, error=SEND_IN_PROGRESS)

        message = self.get_message(message_id)
        body = self.drafts.get(message_id) or ""

        self.sending_id = message_id
        self.error = None
        try:
            outcome = await self.dispatcher.send(message, body)
        except AuthenticationError as exc:
            self.needs_reauth = True
            self.error = str(exc) or "Unauthorized"
            return SendOutcome(message_id=message_id, ok=False, error=self.error)
        finally:
            self.sending_id = None

        if outcome.ok:
            self.success = f"Reply sent to {outcome.recipient}"
            self.messages = [m for m in self.messages if m.id != message_id]
            self.drafts.pop(message_id, None)
        else:
            self.error = outcome.error
        return outcome

    async def answer_all(self) -> list[SendOutcome]:
        """Send every non-blank draft, strictly one message at a time."""
        outcomes: list[SendOutcome] = []
        for message in list(self.messages):
            # Answered elsewhere since the run started.
            if all(m.id != message.id for m in self.messages):
                continue
            if not (self.drafts.get(message.id) or "").strip():
                continue
            outcome = await self.send_reply(message.id)
            outcomes.append(outcome)
            if self.needs_reauth:
                break
        return outcomes
