"""Unread inbox message model.

Only envelope metadata and the provider snippet are kept. Bodies are never
fetched, so a message can be shown and answered without downloading content.
"""

from __future__ import annotations

from email.utils import parsedate_to_datetime

from pydantic import BaseModel, ConfigDict, Field

NO_SUBJECT = "(no subject)"
UNKNOWN_SENDER = "Unknown sender"
UNKNOWN_DATE = "Unknown date"


def first_present(*candidates: str | None, default: str | None = None) -> str | None:
    """Return the first non-empty candidate, evaluated left to right."""
    for candidate in candidates:
        if candidate:
            return candidate
    return default


class Sender(BaseModel):
    """A From header split into display name and address."""

    name: str | None = Field(default=None, description="Display name, quotes stripped")
    address: str | None = Field(default=None, description="Mailbox address")


class Message(BaseModel):
    """One unread inbox entry, normalized from Gmail metadata."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Gmail message ID")
    thread_id: str | None = Field(default=None, alias="threadId", description="Gmail thread ID")
    subject: str = Field(default=NO_SUBJECT, description="Subject header")

    # Keep both raw and parsed forms. Raw is the fallback recipient.
    from_raw: str | None = Field(default=None, alias="from", description="Raw From header")
    from_name: str | None = Field(default=None, alias="fromName", description="Sender display name")
    from_address: str | None = Field(
        default=None, alias="fromAddress", description="Parsed sender email address"
    )

    snippet: str = Field(default="", description="Plain-text preview supplied by Gmail")
    date: str | None = Field(default=None, description="Date header as sent")
    internal_date: str | None = Field(
        default=None,
        alias="internalDate",
        description="Internal timestamp in milliseconds since epoch",
    )
    message_id_header: str | None = Field(
        default=None,
        alias="messageIdHeader",
        description="Message-ID header, used to thread replies",
    )

    def display_sender(self) -> str:
        return first_present(self.from_name, self.from_address, default=UNKNOWN_SENDER)

    def recipient_address(self) -> str | None:
        """Address a reply goes to: the parsed address, else the raw header."""
        return first_present(self.from_address, self.from_raw)

    def recipient_label(self) -> str:
        return first_present(self.from_name, self.from_address, default="recipient")

    def formatted_date(self) -> str:
        """Human-readable date, or the raw header when it cannot be parsed."""
        if not self.date:
            return UNKNOWN_DATE
        try:
            parsed = parsedate_to_datetime(self.date)
        except (TypeError, ValueError, OverflowError):
            return self.date
        return parsed.strftime("%Y-%m-%d %H:%M")
