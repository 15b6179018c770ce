"""Pydantic v2 models for the deck description schema.

This module defines the data structures a deck is read into before rendering.
Models are permissive: every field is optional with a documented default, nulls
are treated as absent, and unknown fields pass through untouched. Entities are
validated one at a time by the renderer so a malformed slide or shape only
drops that entity rather than the whole deck.

Shape records are kept as plain mappings until the scope cascade has merged
them (see ``slidemark.engine.overlay``); only the merged record is coerced into
a ``ShapeRecord``.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from slidemark.engine.units import (
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_UNIT,
    DEFAULT_SLIDE_WIDTH,
)


Number = Union[int, float, str]
ShapeMap = Union[dict[str, Any], list[Any]]


class ShapeKind(str, Enum):
    """Closed set of shape kinds a record dispatches to."""

    TEXT = "text"
    IMAGE = "image"
    LIST = "list"
    VECTOR = "vector"


class PathCommandType(str, Enum):
    """Path command types, valued by their SVG letter."""

    MOVE_TO = "M"
    LINE_TO = "L"
    QUAD_TO = "Q"  # Quadratic Bezier
    ARC_TO = "A"
    CLOSE = "Z"


# ============================================================================
# Base
# ============================================================================


class DeckModel(BaseModel):
    """Base for all deck entities: frozen, permissive, nulls read as absent."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ============================================================================
# Geometry Models
# ============================================================================


class PathCommand(BaseModel):
    """A single command of a vector outline, in shape-box coordinates."""

    model_config = ConfigDict(frozen=True)

    type: PathCommandType
    x: Optional[float] = Field(default=None, description="End point X")
    y: Optional[float] = Field(default=None, description="End point Y")
    # Control point for quadratic curves
    x1: Optional[float] = Field(default=None, description="Control point X")
    y1: Optional[float] = Field(default=None, description="Control point Y")
    # Arc parameters
    rx: Optional[float] = Field(default=None, description="Arc X radius")
    ry: Optional[float] = Field(default=None, description="Arc Y radius")
    rotation: float = Field(default=0.0, description="Arc X-axis rotation in degrees")
    large_arc: bool = Field(default=False, description="Arc large-arc flag")
    sweep: bool = Field(default=False, description="Arc sweep flag")


class SlideSize(DeckModel):
    """Slide dimensions (defaults 1280x720 px, each field independently)."""

    w: Number = DEFAULT_SLIDE_WIDTH
    h: Number = DEFAULT_SLIDE_HEIGHT
    unit: str = DEFAULT_SLIDE_UNIT


# ============================================================================
# Theme & Background Models
# ============================================================================


class Theme(DeckModel):
    """Nested theme tokens (the master convention's ``theme`` block)."""

    colors: dict[str, Any] = Field(default_factory=dict, description="Color name -> literal")
    fonts: dict[str, Any] = Field(default_factory=dict, description="Font role -> family")


class Background(DeckModel):
    """A resolved slide background."""

    fill: Optional[str] = Field(default=None, description="Background color")
    image: Optional[str] = Field(default=None, description="Background image URL")
    image_fit: Optional[str] = Field(default=None, description="CSS background-size")
    inherit: bool = Field(default=False, description="Layout bg inherits from master")

    @property
    def is_empty(self) -> bool:
        """True when nothing would be painted."""
        return not self.fill and not self.image


# ============================================================================
# Shape Model
# ============================================================================


class ShapeRecord(DeckModel):
    """A fully merged shape, ready to render.

    Text fields accept both spellings seen in decks (``text_font`` and
    ``font_family`` and so on); the ``text_*`` spelling wins.
    """

    id: Optional[str] = None
    type: Optional[str] = None

    # Geometry
    x: Optional[Number] = None
    y: Optional[Number] = None
    w: Optional[Number] = None
    h: Optional[Number] = None
    unit: Optional[str] = None

    # Stacking
    z: Optional[Number] = None
    opacity: Optional[Number] = None

    # Text
    text: Optional[str] = None
    text_font: Optional[str] = None
    font_family: Optional[str] = None
    text_size: Optional[Number] = None
    font_size: Optional[Number] = None
    text_weight: Optional[Number] = None
    font_weight: Optional[Number] = None
    text_color: Optional[str] = None
    color: Optional[str] = None
    text_align: Optional[str] = None
    text_valign: Optional[str] = None
    line_height: Optional[Number] = None

    # Lists
    items: list[Any] = Field(default_factory=list)
    bullet: Optional[str] = None

    # Images
    image_src: Optional[str] = None
    alt: Optional[str] = None
    image_fit: Optional[str] = None

    # Vector styling
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None
    stroke_dasharray: Optional[Union[str, list[Number]]] = None
    stroke_linecap: Optional[str] = None
    stroke_linejoin: Optional[str] = None
    stroke_opacity: Optional[Number] = None

    # Vector geometry parameters
    margin: Optional[Number] = None
    curvature: Optional[Number] = None
    tip_size: Optional[Number] = Field(
        default=None, validation_alias=AliasChoices("tipSize", "tip_size")
    )
    stem_size: Optional[Number] = Field(
        default=None, validation_alias=AliasChoices("stemSize", "stem_size")
    )

    @property
    def font(self) -> Optional[str]:
        return self.text_font if self.text_font is not None else self.font_family

    @property
    def size(self) -> Optional[Number]:
        return self.text_size if self.text_size is not None else self.font_size

    @property
    def weight(self) -> Optional[Number]:
        return self.text_weight if self.text_weight is not None else self.font_weight

    @property
    def text_fill(self) -> Optional[str]:
        return self.text_color if self.text_color is not None else self.color


# ============================================================================
# Layout, Master & Slide Models
# ============================================================================


class Layout(DeckModel):
    """A reusable template of shapes and background."""

    id: Optional[str] = None
    name: Optional[str] = None
    bg: Optional[dict[str, Any]] = None
    shapes: Optional[ShapeMap] = None


class Master(DeckModel):
    """A named collection of layouts (master convention)."""

    id: Optional[str] = None
    name: Optional[str] = None
    bg: Optional[dict[str, Any]] = None
    shapes: Optional[ShapeMap] = None
    layouts: list[Any] = Field(default_factory=list)


class Slide(DeckModel):
    """One rendered frame."""

    id: Optional[str] = None
    layout: Optional[str] = None
    master: Optional[str] = None
    bg: Optional[dict[str, Any]] = None
    shapes: Optional[ShapeMap] = None
    meta: dict[str, Any] = Field(default_factory=dict, description="Interpolation values")
    overrides: list[Any] = Field(
        default_factory=list,
        description="Shallow patches keyed by target shape id ({'shape': id, ...})",
    )


# ============================================================================
# Deck Model
# ============================================================================


class Deck(DeckModel):
    """The whole presentation document."""

    id: Optional[str] = None
    version: Optional[str] = None
    slide_size: SlideSize = Field(default_factory=SlideSize)

    # Theme tokens, flat or nested under ``theme``
    colors: dict[str, Any] = Field(default_factory=dict)
    fonts: dict[str, Any] = Field(default_factory=dict)
    theme: Theme = Field(default_factory=Theme)

    layouts: Optional[ShapeMap] = None
    masters: list[Any] = Field(default_factory=list)
    shapes: Optional[ShapeMap] = None
    bg: Optional[dict[str, Any]] = None
    slides: Optional[list[Any]] = None

    def palette(self) -> dict[str, Any]:
        """Color tokens; flat ``colors`` win over ``theme.colors`` per key."""
        return {**self.theme.colors, **self.colors}

    def font_table(self) -> dict[str, Any]:
        """Font tokens; flat ``fonts`` win over ``theme.fonts`` per key."""
        return {**self.theme.fonts, **self.fonts}


LayoutLookup = Literal["map", "master_list"]
BackgroundMode = Literal["inline", "layer"]
