"""Google sign-in for the web app.

Tokens obtained here are kept in the signed cookie session and turned into a
``SessionContext`` for every mailbox call.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from inbox_responder.api.deps import get_app_settings, get_session_context, require_configured
from inbox_responder.api.models import StatusResponse
from inbox_responder.config import Settings
from inbox_responder.exceptions import AuthenticationError
from inbox_responder.session import SessionContext

logger = structlog.get_logger()

router = APIRouter(tags=["auth"])

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

_STATE_KEY = "oauth_state"
_VERIFIER_KEY = "oauth_code_verifier"


def _client_config(settings: Settings) -> dict[str, Any]:
    return {
        "web": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": GOOGLE_AUTH_URI,
            "token_uri": GOOGLE_TOKEN_URI,
            "redirect_uris": [settings.oauth_redirect_uri],
        }
    }


def _build_flow(settings: Settings, **kwargs: Any):
    from google_auth_oauthlib.flow import Flow

    return Flow.from_client_config(
        _client_config(settings),
        scopes=list(settings.gmail_scopes),
        redirect_uri=settings.oauth_redirect_uri,
        **kwargs,
    )


@router.get("/auth/login")
def login(request: Request, settings: Settings = Depends(require_configured)) -> RedirectResponse:
    flow = _build_flow(settings)
    # Offline access + forced consent so Google always returns a refresh token.
    url, state = flow.authorization_url(
        access_type="offline",
        prompt="consent",
        include_granted_scopes="true",
    )
    request.session[_STATE_KEY] = state
    if flow.code_verifier:
        request.session[_VERIFIER_KEY] = flow.code_verifier
    logger.info("oauth_login_started")
    return RedirectResponse(url, status_code=302)


@router.get("/auth/callback")
def callback(request: Request, settings: Settings = Depends(require_configured)) -> RedirectResponse:
    from google.auth.transport.requests import Request as GoogleRequest
    from google.oauth2 import id_token

    state = request.session.pop(_STATE_KEY, None)
    verifier = request.session.pop(_VERIFIER_KEY, None)
    if state is None or request.query_params.get("state") != state:
        raise AuthenticationError("OAuth state mismatch")
    if "code" not in request.query_params:
        raise AuthenticationError(request.query_params.get("error") or "OAuth consent was not granted")

    flow = _build_flow(settings, state=state, code_verifier=verifier)
    try:
        flow.fetch_token(code=request.query_params["code"])
    except Exception as exc:  # noqa: BLE001
        logger.exception("oauth_token_exchange_failed", error=str(exc))
        raise AuthenticationError("OAuth token exchange failed") from exc

    creds = flow.credentials
    email: str | None = None
    if creds.id_token:
        try:
            claims = id_token.verify_oauth2_token(creds.id_token, GoogleRequest(), settings.google_client_id)
        except ValueError as exc:
            raise AuthenticationError("Invalid ID token") from exc
        email = claims.get("email")

    context = SessionContext(
        access_token=creds.token,
        refresh_token=creds.refresh_token,
        user_email=email,
    )
    request.session.clear()
    request.session.update(context.to_mapping())
    logger.info("oauth_login_completed", email=email)
    return RedirectResponse("/", status_code=302)


@router.post("/auth/logout")
def logout(request: Request, _: Settings = Depends(require_configured)) -> dict[str, bool]:
    request.session.clear()
    return {"ok": True}


@router.get("/api/status", response_model=StatusResponse)
def status(
    settings: Settings = Depends(get_app_settings),
    session: SessionContext = Depends(get_session_context),
) -> StatusResponse:
    return StatusResponse(
        configured=settings.is_configured,
        authenticated=settings.is_configured and session.is_authenticated,
        email=session.user_email,
        session_error=session.error,
    )
