"""Unit tests for the unread inbox synchronizer."""

import asyncio

import pytest

from conftest import FakeGmailClient, make_detail
from inbox_responder.exceptions import AuthenticationError, ConfigurationError, GmailAPIError, InboxSyncError
from inbox_responder.gmail.parsing import METADATA_HEADERS
from inbox_responder.inbox.synchronizer import InboxSynchronizer


@pytest.mark.asyncio
async def test_fetch_unread_normalizes_messages(fake_gmail) -> None:
    messages = await InboxSynchronizer(fake_gmail).fetch_unread()

    assert [m.id for m in messages] == ["msg-1", "msg-2"]
    first, second = messages
    assert first.from_name == "Alex Doe"
    assert first.from_address == "alex@example.com"
    assert first.thread_id == "thread-1"
    assert first.message_id_header == "<abc123@mail.example.com>"
    assert second.from_name is None
    assert second.from_address == "sam@example.com"
    assert fake_gmail.authenticated is True


@pytest.mark.asyncio
async def test_fetch_unread_queries_primary_inbox(fake_gmail) -> None:
    await InboxSynchronizer(fake_gmail).fetch_unread()

    assert fake_gmail.list_calls == [
        {"query": "is:unread", "label_ids": ["INBOX"], "max_results": 15}
    ]


@pytest.mark.asyncio
async def test_fetch_unread_respects_cap(mock_settings) -> None:
    details = [make_detail(f"m{i}") for i in range(20)]
    client = FakeGmailClient(mock_settings, details)

    messages = await InboxSynchronizer(client).fetch_unread()

    assert len(messages) == 15
    assert [m.id for m in messages] == [f"m{i}" for i in range(15)]


@pytest.mark.asyncio
async def test_empty_unread_set_short_circuits(mock_settings) -> None:
    client = FakeGmailClient(mock_settings, [])

    messages = await InboxSynchronizer(client).fetch_unread()

    assert messages == []
    assert client.get_calls == []


@pytest.mark.asyncio
async def test_refs_without_id_are_dropped(fake_gmail) -> None:
    fake_gmail.refs.insert(1, {"threadId": "orphan"})
    fake_gmail.refs.append({"id": "", "threadId": "blank"})

    messages = await InboxSynchronizer(fake_gmail).fetch_unread()

    assert [m.id for m in messages] == ["msg-1", "msg-2"]
    assert fake_gmail.get_calls == ["msg-1", "msg-2"]


@pytest.mark.asyncio
async def test_order_follows_list_not_completion(mock_settings) -> None:
    class SlowFirstClient(FakeGmailClient):
        async def get_message(self, message_id, **kwargs):
            if message_id == "first":
                await asyncio.sleep(0.02)
            return await super().get_message(message_id, **kwargs)

    client = SlowFirstClient(mock_settings, [make_detail("first"), make_detail("second")])

    messages = await InboxSynchronizer(client).fetch_unread()

    assert [m.id for m in messages] == ["first", "second"]


@pytest.mark.asyncio
async def test_enrichment_requests_metadata_headers(mock_settings) -> None:
    seen = []

    class RecordingClient(FakeGmailClient):
        async def get_message(self, message_id, *, format="metadata", metadata_headers=None):
            seen.append((format, metadata_headers))
            return await super().get_message(message_id)

    await InboxSynchronizer(RecordingClient(mock_settings, [make_detail("a")])).fetch_unread()

    assert seen == [("metadata", list(METADATA_HEADERS))]
    assert list(METADATA_HEADERS) == ["Subject", "From", "Date", "Message-ID"]


@pytest.mark.asyncio
async def test_list_failure_reports_generic_error(fake_gmail) -> None:
    fake_gmail.failures["list_messages"] = GmailAPIError("quota")

    with pytest.raises(InboxSyncError):
        await InboxSynchronizer(fake_gmail).fetch_unread()


@pytest.mark.asyncio
async def test_single_enrichment_failure_fails_whole_fetch(fake_gmail) -> None:
    fake_gmail.failures["get_message"] = GmailAPIError("boom")

    with pytest.raises(InboxSyncError):
        await InboxSynchronizer(fake_gmail).fetch_unread()


@pytest.mark.asyncio
async def test_credential_failure_stays_distinct(fake_gmail) -> None:
    fake_gmail.failures["list_messages"] = AuthenticationError("token revoked")

    with pytest.raises(AuthenticationError):
        await InboxSynchronizer(fake_gmail).fetch_unread()


@pytest.mark.asyncio
async def test_missing_local_credentials_keep_setup_hint(fake_gmail) -> None:
    fake_gmail.failures["authenticate"] = ConfigurationError("Gmail credentials file not found")

    with pytest.raises(ConfigurationError, match="credentials file not found"):
        await InboxSynchronizer(fake_gmail).fetch_unread()
    assert fake_gmail.list_calls == []
