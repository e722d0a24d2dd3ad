"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest


def make_detail(
    message_id: str,
    *,
    thread_id: str | None = None,
    subject: str | None = "Project update",
    sender: str | None = "Alex Doe <alex@example.com>",
    date: str | None = "Tue, 14 May 2024 09:30:00 +0000",
    message_id_header: str | None = None,
    snippet: str = "Wanted to check on the status of the project.",
) -> dict[str, Any]:
    """Build a Gmail ``messages.get`` (format=metadata) response."""
    headers = []
    for name, value in (
        ("Subject", subject),
        ("From", sender),
        ("Date", date),
        ("Message-ID", message_id_header),
    ):
        if value is not None:
            headers.append({"name": name, "value": value})

    return {
        "id": message_id,
        "threadId": thread_id or f"thread-{message_id}",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": snippet,
        "internalDate": "1715679000000",
        "payload": {"headers": headers},
    }


class FakeGmailClient:
    """In-memory stand-in for ``GmailClient``.

    ``failures`` maps an operation name to the exception it should raise.
    """

    def __init__(self, settings, details: list[dict[str, Any]] | None = None) -> None:
        self.settings = settings
        self.details = {d["id"]: d for d in details or []}
        self.refs: list[dict[str, Any]] = [
            {"id": d["id"], "threadId": d["threadId"]} for d in details or []
        ]
        self.failures: dict[str, Exception] = {}
        self.authenticated = False
        self.list_calls: list[dict[str, Any]] = []
        self.get_calls: list[str] = []
        self.sent: list[dict[str, Any]] = []
        self.modified: list[dict[str, Any]] = []

    def _maybe_fail(self, operation: str) -> None:
        exc = self.failures.get(operation)
        if exc is not None:
            raise exc

    async def authenticate(self) -> None:
        self._maybe_fail("authenticate")
        self.authenticated = True

    async def list_messages(self, *, query=None, label_ids=None, max_results=None):
        self.list_calls.append({"query": query, "label_ids": label_ids, "max_results": max_results})
        self._maybe_fail("list_messages")
        refs = list(self.refs)
        return refs if max_results is None else refs[:max_results]

    async def get_message(self, message_id, *, format="metadata", metadata_headers=None):
        self.get_calls.append(message_id)
        self._maybe_fail("get_message")
        return self.details[message_id]

    async def send_message(self, raw, *, thread_id=None):
        self._maybe_fail("send_message")
        self.sent.append({"raw": raw, "thread_id": thread_id})
        return {"id": f"sent-{len(self.sent)}", "threadId": thread_id}

    async def modify_message(self, message_id, *, add_label_ids=None, remove_label_ids=None):
        self._maybe_fail("modify_message")
        self.modified.append(
            {
                "message_id": message_id,
                "add_label_ids": add_label_ids,
                "remove_label_ids": remove_label_ids,
            }
        )
        return {"id": message_id}


@pytest.fixture
def mock_settings():
    """Provide configured settings for testing."""
    from inbox_responder.config import Settings

    return Settings(
        google_client_id="test-client-id",
        google_client_secret="test-client-secret",
        session_secret="test-session-secret",
        base_url="http://testserver",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def sample_details() -> list[dict[str, Any]]:
    """Two unread messages as Gmail returns them."""
    return [
        make_detail(
            "msg-1",
            thread_id="thread-1",
            subject="Quarterly report",
            sender='"Alex Doe" <alex@example.com>',
            message_id_header="<abc123@mail.example.com>",
        ),
        make_detail(
            "msg-2",
            thread_id="thread-2",
            subject="Lunch?",
            sender="sam@example.com",
            snippet="Are you free   \n on Friday?",
        ),
    ]


@pytest.fixture
def fake_gmail(mock_settings, sample_details) -> FakeGmailClient:
    return FakeGmailClient(mock_settings, sample_details)
