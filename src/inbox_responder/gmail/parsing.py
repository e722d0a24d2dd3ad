"""Helpers for parsing Gmail message metadata into internal models."""

from __future__ import annotations

import re
from typing import Any

from inbox_responder.models import Message, Sender
from inbox_responder.models.message import NO_SUBJECT

# Headers requested for every unread message; bodies are never fetched.
METADATA_HEADERS: tuple[str, ...] = ("Subject", "From", "Date", "Message-ID")

_SENDER_RE = re.compile(r"^(.*?)(?:\s*<(.+?)>)?$", re.DOTALL)


def parse_sender(value: str | None) -> Sender:
    """Split a From header into display name and address.

    ``"Alex Doe <alex@example.com>"`` gives both parts; a bare address gives
    only the address. Quote characters are stripped from display names.
    """
    if not value:
        return Sender()

    match = _SENDER_RE.match(value)
    if match is None:
        return Sender(address=value)

    display, bracketed = match.group(1), match.group(2)
    if bracketed is None:
        return Sender(address=display.strip() or None)

    name = display.replace('"', "").strip()
    return Sender(name=name or None, address=bracketed.strip() or None)


def header_value(message: dict[str, Any], name: str) -> str | None:
    """Return the first header called ``name`` (exact match, as Gmail echoes it)."""
    payload = message.get("payload") or {}
    for h in payload.get("headers") or []:
        if h.get("name") == name:
            value = h.get("value")
            return value if isinstance(value, str) else None
    return None


def message_to_inbox_message(
    detail: dict[str, Any],
    *,
    message_id: str,
    thread_id: str | None = None,
) -> Message:
    """Convert a Gmail API message (format=metadata) to a ``Message``.

    Args:
        detail: Gmail API message dict.
        message_id: Id from the list call.
        thread_id: Thread id from the list call, preferred over the detail's.
    """

    from_raw = header_value(detail, "From")
    sender = parse_sender(from_raw)
    # Only a missing header gets the placeholder; an empty one is kept as is.
    subject = header_value(detail, "Subject")

    return Message(
        id=message_id,
        thread_id=thread_id or detail.get("threadId") or None,
        subject=NO_SUBJECT if subject is None else subject,
        from_raw=from_raw,
        from_name=sender.name,
        from_address=sender.address,
        snippet=detail.get("snippet") or "",
        internal_date=detail.get("internalDate"),
        date=header_value(detail, "Date"),
        message_id_header=header_value(detail, "Message-ID"),
    )
