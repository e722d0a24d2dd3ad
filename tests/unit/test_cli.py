"""Unit tests for the command-line interface."""

import pytest

from conftest import FakeGmailClient
from inbox_responder import cli
from inbox_responder.exceptions import ConfigurationError, GmailAPIError


@pytest.fixture
def patched_client(monkeypatch, sample_details):
    created = []

    def factory(settings):
        client = FakeGmailClient(settings, sample_details)
        created.append(client)
        return client

    monkeypatch.setattr(cli, "GmailClient", factory)
    return created


def test_templates_command(capsys) -> None:
    assert cli.main(["templates"]) == 0

    out = capsys.readouterr().out
    assert "[acknowledge] Acknowledgement" in out
    assert "[follow-up] Ask for details" in out


def test_list_command(capsys, patched_client) -> None:
    assert cli.main(["list"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].split("\t") == ["msg-1", "2024-05-14 09:30", "Alex Doe", "Quarterly report"]
    assert lines[1].split("\t")[2] == "sam@example.com"


def test_answer_all_dry_run_sends_nothing(capsys, patched_client) -> None:
    assert cli.main(["answer-all", "--template", "smart", "--dry-run"]) == 0

    out = capsys.readouterr().out
    assert "--- To: alex@example.com (Quarterly report)" in out
    assert "Are you free on Friday?" in out
    assert patched_client[0].sent == []


def test_answer_all_sends_each_message(capsys, patched_client) -> None:
    assert cli.main(["answer-all"]) == 0

    out = capsys.readouterr().out
    assert "Reply sent to Alex Doe" in out
    assert "Answered 2 of 2 messages" in out
    assert len(patched_client[0].sent) == 2


def test_mailbox_failure_exits_non_zero(capsys, monkeypatch, sample_details) -> None:
    def factory(settings):
        client = FakeGmailClient(settings, sample_details)
        client.failures["list_messages"] = GmailAPIError("down")
        return client

    monkeypatch.setattr(cli, "GmailClient", factory)

    assert cli.main(["list"]) == 1
    assert "Error: Failed to load messages" in capsys.readouterr().err


def test_missing_credentials_prints_setup_hint(capsys, monkeypatch, sample_details) -> None:
    def factory(settings):
        client = FakeGmailClient(settings, sample_details)
        client.failures["authenticate"] = ConfigurationError("Gmail credentials file not found: credentials.json")
        return client

    monkeypatch.setattr(cli, "GmailClient", factory)

    assert cli.main(["list"]) == 1
    assert "Error: Gmail credentials file not found" in capsys.readouterr().err
