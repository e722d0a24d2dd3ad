"""Quick reply templates and the smart draft generator.

All generators are pure: the same message always produces the same text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from inbox_responder.exceptions import UnknownTemplateError
from inbox_responder.models import Message

SMART_TEMPLATE_ID = "smart"

_WHITESPACE_RE = re.compile(r"\s+")


def _greeting_name(message: Message) -> str:
    return message.from_name or "there"


def _acknowledge(message: Message) -> str:
    return (
        f"Hi {_greeting_name(message)},\n\n"
        f'Thanks for reaching out about "{message.subject}". I received your message '
        "and will circle back with a full response soon.\n\n"
        "Best,\n"
    )


def _schedule(message: Message) -> str:
    return (
        f"Hi {_greeting_name(message)},\n\n"
        f'Appreciate the note regarding "{message.subject}". Happy to connect. Would you '
        "have time for a quick call later this week? Let me know a few windows that "
        "work for you.\n\n"
        "Thanks,\n"
    )


def _follow_up(message: Message) -> str:
    return (
        f"Hi {_greeting_name(message)},\n\n"
        f'Thanks for reaching out! Could you share a bit more detail about "{message.subject}" '
        "so I can help faster?\n\n"
        "Looking forward to your reply,\n"
    )


@dataclass(frozen=True)
class QuickReplyTemplate:
    """A named canned reply."""

    id: str
    label: str
    render: Callable[[Message], str]


# Order matters: the first template seeds every draft.
QUICK_REPLIES: tuple[QuickReplyTemplate, ...] = (
    QuickReplyTemplate(id="acknowledge", label="Acknowledgement", render=_acknowledge),
    QuickReplyTemplate(id="schedule", label="Schedule a call", render=_schedule),
    QuickReplyTemplate(id="follow-up", label="Ask for details", render=_follow_up),
)

TEMPLATE_IDS: tuple[str, ...] = tuple(t.id for t in QUICK_REPLIES)

PREVIEW_MESSAGE = Message(
    id="preview",
    subject="Project update",
    from_raw="preview@example.com",
    from_name="Alex",
    from_address="preview@example.com",
    snippet="Wanted to check on the status of the project.",
)


def get_template(template_id: str) -> QuickReplyTemplate:
    for template in QUICK_REPLIES:
        if template.id == template_id:
            return template
    raise UnknownTemplateError(template_id)


def default_reply(message: Message) -> str:
    return QUICK_REPLIES[0].render(message)


def smart_reply(message: Message) -> str:
    """Draft a reply that restates the sender's snippet.

    Without a sender address there is nothing to personalize, so the default
    template is used instead.
    """
    if not message.from_address:
        return default_reply(message)

    cleaned = _WHITESPACE_RE.sub(" ", message.snippet).strip()
    greeting = f"Hi {message.from_name}," if message.from_name else "Hello,"
    understood = f"Here's what I understood from your note: {cleaned}. " if cleaned else ""

    return (
        f"{greeting}\n\n"
        f'Thanks for getting in touch regarding "{message.subject}". {understood}'
        "I'll review the details and follow up with the next steps shortly.\n\n"
        "Best regards,\n"
    )


def render_template(template_id: str, message: Message) -> str:
    """Render a quick template by id, or the smart draft for ``"smart"``."""
    if template_id == SMART_TEMPLATE_ID:
        return smart_reply(message)
    return get_template(template_id).render(message)


def preview_templates() -> list[tuple[QuickReplyTemplate, str]]:
    """Each template rendered against a sample message, for display."""
    return [(t, t.render(PREVIEW_MESSAGE).strip()) for t in QUICK_REPLIES]
