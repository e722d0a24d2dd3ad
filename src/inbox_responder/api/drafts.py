"""Template gallery and draft rendering.

These routes are pure: they never call Gmail and need no session.
"""

from __future__ import annotations

from fastapi import APIRouter

from inbox_responder.api.models import DraftResponse, TemplatesResponse, TemplateSummary
from inbox_responder.models import Message
from inbox_responder.replies.templates import preview_templates, render_template

router = APIRouter(prefix="/api", tags=["drafts"])


@router.get("/templates", response_model=TemplatesResponse)
def list_templates() -> TemplatesResponse:
    return TemplatesResponse(
        templates=[
            TemplateSummary(id=t.id, label=t.label, preview=preview)
            for t, preview in preview_templates()
        ]
    )


@router.post("/drafts/{template_id}", response_model=DraftResponse)
def render_draft(template_id: str, message: Message) -> DraftResponse:
    """Render ``template_id`` (or ``smart``) for the posted message."""
    return DraftResponse(body=render_template(template_id, message))
