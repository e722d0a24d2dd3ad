"""Outbound reply envelope construction.

Gmail's ``messages.send`` takes the whole RFC 2822 message as URL-safe base64
without padding.
"""

from __future__ import annotations

import base64

REPLY_PREFIX = "Re:"


def normalize_subject(subject: str) -> str:
    """Prefix ``Re: `` unless the subject already carries it."""
    if subject.startswith(REPLY_PREFIX):
        return subject
    return f"{REPLY_PREFIX} {subject}"


def build_envelope(
    *,
    to: str,
    subject: str,
    body: str,
    in_reply_to: str | None = None,
) -> str:
    """Render a minimal plain-text message.

    When ``in_reply_to`` is given, ``In-Reply-To`` and ``References`` point at
    it so mail clients keep the reply in the original conversation.
    """
    headers = [
        f"To: {to}",
        f"Subject: {subject}",
        'Content-Type: text/plain; charset="UTF-8"',
        "Content-Transfer-Encoding: 7bit",
    ]
    if in_reply_to:
        headers.append(f"In-Reply-To: {in_reply_to}")
        headers.append(f"References: {in_reply_to}")

    return "\n".join([*headers, "", body])


def encode_envelope(envelope: str) -> str:
    """URL-safe base64 of the UTF-8 bytes, trailing ``=`` stripped."""
    encoded = base64.urlsafe_b64encode(envelope.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")
