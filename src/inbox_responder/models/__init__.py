"""Data models for Inbox Responder.

This module contains Pydantic models for data validation and serialization.
Attribute names are snake_case; the JSON surface uses the camelCase names the
browser client expects.
"""

from inbox_responder.models.message import Message, Sender
from inbox_responder.models.reply import ReplyRequest, SendOutcome

__all__ = ["Message", "ReplyRequest", "SendOutcome", "Sender"]
