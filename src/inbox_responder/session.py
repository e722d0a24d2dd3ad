"""Explicit session context.

Every operation that touches the mailbox receives a ``SessionContext`` rather
than looking one up globally. The web app stores the same fields in a signed
cookie session; the CLI builds one from the local token file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

SESSION_KEYS = ("access_token", "refresh_token", "user_email", "error")


@dataclass(frozen=True)
class SessionContext:
    """Credentials of the signed-in mailbox user."""

    access_token: str | None = None
    refresh_token: str | None = None
    user_email: str | None = None
    # Set when a token refresh failed; the user must sign in again.
    error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "SessionContext":
        if not data:
            return cls()
        return cls(**{key: data.get(key) for key in SESSION_KEYS})

    def to_mapping(self) -> dict[str, Any]:
        return {key: getattr(self, key) for key in SESSION_KEYS if getattr(self, key) is not None}


ANONYMOUS = SessionContext()
