"""Slidemark: compile declarative slide decks to scoped HTML fragments."""

from slidemark.engine.deck_renderer import DeckRenderer, render_deck
from slidemark.engine.policy import RenderPolicy

__version__ = "1.0.0"

__all__ = [
    "DeckRenderer",
    "RenderPolicy",
    "render_deck",
]
