"""Deck description models."""

from slidemark.dsl.schema import (
    Background,
    Deck,
    Layout,
    Master,
    PathCommand,
    PathCommandType,
    ShapeKind,
    ShapeRecord,
    Slide,
    SlideSize,
    Theme,
)

__all__ = [
    "Background",
    "Deck",
    "Layout",
    "Master",
    "PathCommand",
    "PathCommandType",
    "ShapeKind",
    "ShapeRecord",
    "Slide",
    "SlideSize",
    "Theme",
]
