"""Render routes."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from slidemark.api.config import Settings, get_settings
from slidemark.dsl.schema import LayoutLookup
from slidemark.engine.deck_renderer import render_deck
from slidemark.engine.policy import RenderPolicy

logger = logging.getLogger(__name__)

router = APIRouter()


class RenderRequest(BaseModel):
    """Request to render a deck."""
    deck: Optional[dict[str, Any]] = Field(default=None, description="Parsed deck document")
    layout_lookup: Optional[LayoutLookup] = Field(
        default=None,
        description="'map' or 'master_list'; server default when omitted",
    )
    token_resolution: Optional[bool] = Field(
        default=None,
        description="Resolve theme tokens; preset default when omitted",
    )


class RenderResponse(BaseModel):
    """Rendered fragment."""
    html: str
    empty: bool


def resolve_policy(
    settings: Settings,
    layout_lookup: Optional[str] = None,
    token_resolution: Optional[bool] = None,
) -> RenderPolicy:
    """Server default policy with per-request overrides applied."""
    policy = settings.render_policy(layout_lookup)
    if token_resolution is not None:
        policy = policy.model_copy(update={"token_resolution": token_resolution})
    return policy


def render_request(request: RenderRequest, settings: Settings) -> str:
    policy = resolve_policy(settings, request.layout_lookup, request.token_resolution)
    html = render_deck(request.deck, policy)
    if not html:
        logger.info("Deck rendered to an empty fragment")
    return html


@router.post("", response_model=RenderResponse)
async def render(
    request: RenderRequest,
    settings: Settings = Depends(get_settings),
):
    """Render a deck and return the fragment as JSON.

    ``empty`` is true when there was nothing to render (no deck, no slides
    or an unsupported version).
    """
    html = render_request(request, settings)
    return RenderResponse(html=html, empty=not html)


@router.post("/html", response_class=HTMLResponse)
async def render_html(
    request: RenderRequest,
    settings: Settings = Depends(get_settings),
):
    """Render a deck and return the bare fragment."""
    return HTMLResponse(content=render_request(request, settings))
