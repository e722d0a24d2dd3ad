"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Depends, Request

from inbox_responder.config import Settings
from inbox_responder.exceptions import AuthenticationError, ConfigurationError
from inbox_responder.gmail.client import GmailClient
from inbox_responder.session import ANONYMOUS, SessionContext


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_configured(settings: Settings = Depends(get_app_settings)) -> Settings:
    if not settings.is_configured:
        raise ConfigurationError("OAuth client and session secrets are not configured")
    return settings


def get_session_context(request: Request) -> SessionContext:
    # The session middleware is only installed when the app is configured.
    data = request.scope.get("session")
    if data is None:
        return ANONYMOUS
    return SessionContext.from_mapping(data)


def require_session(
    _: Settings = Depends(require_configured),
    session: SessionContext = Depends(get_session_context),
) -> SessionContext:
    if not session.is_authenticated:
        raise AuthenticationError("Unauthorized")
    return session


def get_gmail_client(
    settings: Settings = Depends(get_app_settings),
    session: SessionContext = Depends(require_session),
) -> GmailClient:
    return GmailClient(settings, session=session)
