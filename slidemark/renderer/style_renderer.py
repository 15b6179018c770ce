"""Translate shape attributes into CSS declarations."""

from typing import Any, Iterable, Mapping, Optional

from slidemark.dsl.schema import Background, ShapeRecord
from slidemark.engine.text import escape_html
from slidemark.engine.tokens import TokenTables
from slidemark.engine.units import (
    DEFAULT_BACKGROUND_SIZE,
    DEFAULT_H,
    DEFAULT_SHAPE_UNIT,
    DEFAULT_W,
    DEFAULT_X,
    DEFAULT_Y,
    format_number,
)


Declarations = list[tuple[str, str]]


# Map horizontal alignment to flex main-axis justification
JUSTIFY_MAP = {
    "left": "flex-start",
    "center": "center",
    "right": "flex-end",
    "justify": "space-between",
}

# Map vertical alignment to flex cross-axis alignment
ALIGN_ITEMS_MAP = {
    "top": "flex-start",
    "middle": "center",
    "bottom": "flex-end",
}


def to_style(declarations: Iterable[tuple[str, Any]]) -> str:
    """Serialise declarations as ``prop: value;`` joined by single spaces."""
    return " ".join(f"{prop}: {format_number(value)};" for prop, value in declarations)


def style_attribute(declarations: Iterable[tuple[str, Any]]) -> str:
    """A complete, escaped ``style="..."`` attribute."""
    return f'style="{escape_html(to_style(declarations))}"'


class StyleRenderer:
    """Builds declaration lists for shapes, text and backgrounds."""

    def __init__(self, tokens: Optional[TokenTables] = None):
        """
        Args:
            tokens: Token tables for font and text color resolution.
        """
        self.tokens = tokens or TokenTables(enabled=False)

    def box(self, shape: ShapeRecord) -> Declarations:
        """Positional declarations: geometry, then z-index and opacity if set.

        Args:
            shape: The merged shape.

        Returns:
            Ordered (property, value) pairs.
        """
        unit = shape.unit if shape.unit is not None else DEFAULT_SHAPE_UNIT
        geometry = (
            ("left", shape.x, DEFAULT_X),
            ("top", shape.y, DEFAULT_Y),
            ("width", shape.w, DEFAULT_W),
            ("height", shape.h, DEFAULT_H),
        )
        declarations: Declarations = [
            (prop, f"{format_number(value if value is not None else default)}{unit}")
            for prop, value, default in geometry
        ]

        # z: 0 counts as set
        if shape.z is not None:
            declarations.append(("z-index", format_number(shape.z)))
        if shape.opacity is not None:
            declarations.append(("opacity", format_number(shape.opacity)))
        return declarations

    def alignment(
        self,
        horizontal: Optional[str],
        vertical: Optional[str],
        default_h: str = "left",
        default_v: str = "top",
    ) -> Declarations:
        """Flex alignment for a block; unknown values use the caller's defaults."""
        justify = JUSTIFY_MAP.get(horizontal or default_h, JUSTIFY_MAP[default_h])
        align = ALIGN_ITEMS_MAP.get(vertical or default_v, ALIGN_ITEMS_MAP[default_v])
        return [("justify-content", justify), ("align-items", align)]

    def shape_alignment(
        self,
        shape: ShapeRecord,
        default_h: str = "left",
        default_v: str = "top",
    ) -> Declarations:
        return self.alignment(shape.text_align, shape.text_valign, default_h, default_v)

    def text(self, shape: ShapeRecord) -> Declarations:
        """Font declarations, each only when the shape sets it."""
        declarations: Declarations = []
        if shape.font:
            declarations.append(("font-family", format_number(self.tokens.font(shape.font))))
        if _is_set(shape.size):
            declarations.append(("font-size", f"{format_number(shape.size)}px"))
        if _is_set(shape.weight):
            declarations.append(("font-weight", format_number(shape.weight)))
        if shape.text_fill:
            declarations.append(("color", format_number(self.tokens.color(shape.text_fill))))
        if shape.text_align:
            declarations.append(("text-align", shape.text_align))
        if _is_set(shape.line_height):
            declarations.append(("line-height", format_number(shape.line_height)))
        return declarations

    def background(self, bg: Optional[Mapping[str, Any] | Background]) -> Declarations:
        """Background declarations for a resolved background record."""
        if bg is None:
            return []
        if not isinstance(bg, Background):
            bg = Background.model_validate(bg)

        declarations: Declarations = []
        if bg.fill:
            declarations.append(("background-color", bg.fill))
        if bg.image:
            # Quotes would end the url() string early
            image_url = bg.image.replace("'", "%27")
            declarations.extend([
                ("background-image", f"url('{image_url}')"),
                ("background-size", bg.image_fit or DEFAULT_BACKGROUND_SIZE),
                ("background-position", "center"),
                ("background-repeat", "no-repeat"),
            ])
        return declarations


def _is_set(value: Any) -> bool:
    return value is not None and value != ""
