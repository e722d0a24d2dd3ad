"""Unread listing and reply APIs.

Both routes act on behalf of the signed-in session only. A missing or
rejected credential answers 401 so the browser can ask the user to sign in
again; upstream failures answer 500 with a generic message.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from inbox_responder.api.deps import get_gmail_client
from inbox_responder.api.models import ErrorResponse, MessagesResponse, ReplyResponse
from inbox_responder.gmail.client import GmailClient
from inbox_responder.inbox.synchronizer import InboxSynchronizer
from inbox_responder.models import ReplyRequest
from inbox_responder.replies.dispatcher import ReplyDispatcher

router = APIRouter(prefix="/api/gmail", tags=["gmail"])

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _clear_session_error(request: Request) -> None:
    # The mailbox accepted the credential, so an earlier rejection no longer applies.
    session = request.scope.get("session")
    if session:
        session.pop("error", None)


@router.get("/list", response_model=MessagesResponse, responses=_ERRORS)
async def list_unread(request: Request, client: GmailClient = Depends(get_gmail_client)) -> MessagesResponse:
    messages = await InboxSynchronizer(client).fetch_unread()
    _clear_session_error(request)
    return MessagesResponse(messages=messages)


@router.post("/reply", response_model=ReplyResponse, responses=_ERRORS)
async def send_reply(
    request: Request,
    payload: ReplyRequest,
    client: GmailClient = Depends(get_gmail_client),
) -> ReplyResponse:
    await ReplyDispatcher(client).send_reply(payload)
    _clear_session_error(request)
    return ReplyResponse(ok=True)
