"""Command-line interface for Inbox Responder.

This module provides the main entry point for the CLI application. Mailbox
commands use the local installed-app token flow; ``serve`` runs the web app.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from inbox_responder import __version__
from inbox_responder.config import get_settings
from inbox_responder.exceptions import InboxResponderError
from inbox_responder.gmail.client import GmailClient
from inbox_responder.inbox.synchronizer import InboxSynchronizer
from inbox_responder.log_config import configure_logging
from inbox_responder.replies.dispatcher import ReplyDispatcher
from inbox_responder.replies.templates import SMART_TEMPLATE_ID, TEMPLATE_IDS, preview_templates, render_template

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox-responder", description="Inbox Responder")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the web app")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: settings host)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: settings port)")

    subparsers.add_parser("list", help="Show unread inbox messages")
    subparsers.add_parser("templates", help="Show the quick reply templates")

    answer_parser = subparsers.add_parser(
        "answer-all",
        help="Reply to every unread message with the same template",
    )
    answer_parser.add_argument(
        "--template",
        choices=[*TEMPLATE_IDS, SMART_TEMPLATE_ID],
        default=TEMPLATE_IDS[0],
        help="Template used to draft each reply (default: %(default)s)",
    )
    answer_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the drafts without sending anything",
    )

    return parser


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from inbox_responder.api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


async def _cmd_list(args: argparse.Namespace) -> int:
    synchronizer = InboxSynchronizer(GmailClient(get_settings()))
    messages = await synchronizer.fetch_unread()

    if not messages:
        print("No unread emails detected in your inbox.")
        return 0

    for m in messages:
        print(f"{m.id}\t{m.formatted_date()}\t{m.display_sender()}\t{m.subject}")
    return 0


def _cmd_templates(args: argparse.Namespace) -> int:
    for template, preview in preview_templates():
        print(f"[{template.id}] {template.label}\n{preview}\n")
    return 0


async def _cmd_answer_all(args: argparse.Namespace) -> int:
    client = GmailClient(get_settings())
    messages = await InboxSynchronizer(client).fetch_unread()
    drafts = {m.id: render_template(args.template, m) for m in messages}

    if args.dry_run:
        for m in messages:
            print(f"--- To: {m.recipient_address()} ({m.subject})\n{drafts[m.id]}")
        return 0

    outcomes = await ReplyDispatcher(client).send_all(messages, drafts)
    failed = 0
    for outcome in outcomes:
        if outcome.ok:
            print(f"Reply sent to {outcome.recipient}")
        else:
            failed += 1
            print(f"Failed to reply to {outcome.recipient}: {outcome.error}")

    print(f"Answered {len(outcomes) - failed} of {len(outcomes)} messages")
    return 1 if failed else 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Inbox Responder CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("inbox_responder_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        if parsed.command == "serve":
            return _cmd_serve(parsed)
        if parsed.command == "list":
            return asyncio.run(_cmd_list(parsed))
        if parsed.command == "templates":
            return _cmd_templates(parsed)
        if parsed.command == "answer-all":
            return asyncio.run(_cmd_answer_all(parsed))
    except InboxResponderError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
