"""FastAPI application for Inbox Responder.

Without the OAuth client and session secrets the app still starts: mailbox
and sign-in routes answer 503 and ``/api/status`` reports ``configured: false``.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from inbox_responder.api.auth import router as auth_router
from inbox_responder.api.drafts import router as drafts_router
from inbox_responder.api.gmail import router as gmail_router
from inbox_responder.config import Settings, get_settings
from inbox_responder.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InboxResponderError,
    InboxSyncError,
    ReplyDispatchError,
    UnknownTemplateError,
    ValidationError,
)
from inbox_responder.log_config import configure_logging

logger = structlog.get_logger()

# Checked in order; the first matching class wins.
ERROR_RESPONSES: tuple[tuple[type[InboxResponderError], int, str], ...] = (
    (AuthenticationError, 401, "Unauthorized"),
    (ValidationError, 400, "Missing required fields"),
    (UnknownTemplateError, 404, "Unknown template"),
    (ConfigurationError, 503, "Not configured"),
    (InboxSyncError, 500, "Failed to load messages"),
    (ReplyDispatchError, 500, "Failed to send reply"),
)


async def _handle_inbox_error(request: Request, exc: InboxResponderError) -> JSONResponse:
    for cls, status_code, message in ERROR_RESPONSES:
        if isinstance(exc, cls):
            break
    else:
        status_code, message = 500, "Internal error"

    # A rejected token on a signed-in session: flag it so the UI asks for sign-in again.
    session = request.scope.get("session")
    if isinstance(exc, AuthenticationError) and session and session.get("access_token"):
        session["error"] = "RefreshAccessTokenError"

    logger.warning(
        "request_failed",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Inbox Responder", debug=settings.debug)
    app.state.settings = settings

    if settings.is_configured:
        app.add_middleware(
            SessionMiddleware,
            secret_key=settings.session_secret,
            same_site="lax",
            https_only=settings.base_url.startswith("https://"),
        )
    else:
        logger.warning("app_not_configured")

    app.add_exception_handler(InboxResponderError, _handle_inbox_error)

    app.include_router(auth_router)
    app.include_router(gmail_router)
    app.include_router(drafts_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
