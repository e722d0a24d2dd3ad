"""Response models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from inbox_responder.models import Message


class MessagesResponse(BaseModel):
    messages: list[Message]


class ReplyResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str


class TemplateSummary(BaseModel):
    id: str
    label: str
    preview: str


class TemplatesResponse(BaseModel):
    templates: list[TemplateSummary]


class DraftResponse(BaseModel):
    body: str


class StatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    configured: bool
    authenticated: bool
    email: str | None = None
    session_error: str | None = Field(default=None, alias="sessionError")
