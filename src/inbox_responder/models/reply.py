"""Reply request and outcome models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_REPLY_FIELDS: tuple[str, ...] = ("message_id", "thread_id", "to", "subject", "body")


class ReplyRequest(BaseModel):
    """Payload of a reply send.

    Every field is optional at parse time so that a missing value is reported
    as a validation failure of the reply rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    message_id: str | None = Field(default=None, alias="messageId")
    thread_id: str | None = Field(default=None, alias="threadId")
    to: str | None = None
    subject: str | None = None
    body: str | None = None
    message_header_id: str | None = Field(default=None, alias="messageHeaderId")

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        for name in REQUIRED_REPLY_FIELDS:
            value = getattr(self, name)
            if value is None or not value.strip():
                missing.append(name)
        return missing


class SendOutcome(BaseModel):
    """Result of answering a single message."""

    message_id: str
    ok: bool
    recipient: str | None = None
    error: str | None = None
