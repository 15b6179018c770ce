"""Sample library routes."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from slidemark.api.config import Settings, get_settings
from slidemark.api.dependencies import get_sample_store
from slidemark.api.routes.render import resolve_policy
from slidemark.dsl.schema import LayoutLookup
from slidemark.engine.deck_renderer import render_deck
from slidemark.samples.store import SampleStore

router = APIRouter()


class SampleListResponse(BaseModel):
    """Sample list response."""
    samples: list[str]
    total: int


def _load_sample(store: SampleStore, name: str) -> dict[str, Any]:
    try:
        return store.get_or_raise(name)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Sample '{name}' not found",
        )


def _lookup_for(deck: dict[str, Any]) -> Optional[str]:
    """Decks that only carry masters use the master/layout list convention."""
    if deck.get("masters") and not deck.get("layouts"):
        return "master_list"
    return None


@router.get("", response_model=SampleListResponse)
async def list_samples(store: SampleStore = Depends(get_sample_store)):
    """List the names of the bundled sample decks."""
    names = store.list_names()
    return SampleListResponse(samples=names, total=len(names))


@router.get("/{name}")
async def get_sample(name: str, store: SampleStore = Depends(get_sample_store)) -> dict[str, Any]:
    """Get a sample deck document."""
    return _load_sample(store, name)


@router.get("/{name}/html", response_class=HTMLResponse)
async def get_sample_html(
    name: str,
    layout_lookup: Optional[LayoutLookup] = None,
    token_resolution: Optional[bool] = None,
    store: SampleStore = Depends(get_sample_store),
    settings: Settings = Depends(get_settings),
):
    """Render a sample deck to a fragment.

    Without an explicit ``layout_lookup`` the convention is picked from the
    deck's shape: master-only decks use the master list lookup.
    """
    deck = _load_sample(store, name)
    policy = resolve_policy(settings, layout_lookup or _lookup_for(deck), token_resolution)
    return HTMLResponse(content=render_deck(deck, policy))
