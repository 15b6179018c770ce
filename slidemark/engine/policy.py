"""
policy.py — Render conventions as one small, frozen policy object.

Decks arrive in two surface conventions that share the whole pipeline:

* keyed: layouts looked up by map key, colors and fonts may be palette
  tokens, a ``version`` gate, background inline on the slide container, and
  unknown shape types are dropped.
* mastered: layouts found by scanning a list of masters, literal colors and
  fonts, background as a backmost layer, untyped shapes drawn as rectangles,
  and vector margins at 10% of the shorter side.

The renderer reads only this object, never the convention name.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from slidemark.dsl.schema import BackgroundMode, LayoutLookup


DEFAULT_DECK_CLASS = "slidemark-deck"


class RenderPolicy(BaseModel):
    """Convention switches for one render call."""

    model_config = ConfigDict(frozen=True)

    layout_lookup: LayoutLookup = Field(
        default="map",
        description="'map': deck.layouts[key]; 'master_list': scan deck.masters",
    )
    token_resolution: bool = Field(
        default=True,
        description="Resolve fill/stroke/text color/font through the theme tables",
    )
    deck_class: str = Field(
        default=DEFAULT_DECK_CLASS,
        pattern=r"^[A-Za-z_][A-Za-z0-9_-]*$",
        description="Class the stylesheet is scoped to",
    )
    check_version: bool = Field(
        default=True,
        description="Reject decks whose version does not start with '1.'",
    )
    background_mode: BackgroundMode = Field(
        default="inline",
        description="'inline': style on the slide; 'layer': backmost div",
    )
    fallback_family: Optional[str] = Field(
        default=None,
        description="Vector family for shapes with a missing or unknown type",
    )
    margin_ratio: float = Field(
        default=0.0,
        ge=0.0,
        lt=0.5,
        description="Default vector margin as a fraction of min(w, h)",
    )

    @classmethod
    def keyed(cls, **overrides) -> "RenderPolicy":
        """Map-keyed layouts with palette tokens."""
        return cls(**overrides)

    @classmethod
    def mastered(cls, **overrides) -> "RenderPolicy":
        """Master/layout list scan with literal values."""
        values = dict(
            layout_lookup="master_list",
            token_resolution=False,
            check_version=False,
            background_mode="layer",
            fallback_family="rectangle",
            margin_ratio=0.1,
        )
        values.update(overrides)
        return cls(**values)
