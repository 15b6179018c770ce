"""Render vector shape families to SVG.

Each family is a closed-form outline built from the shape's own box
(``w`` x ``h``) and a few numeric parameters, expressed as a list of
PathCommand objects and serialised to an SVG ``d`` attribute. The ``<svg>``
viewBox is the same box with ``preserveAspectRatio="none"``, so one
definition stretches to any aspect ratio.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from slidemark.dsl.schema import PathCommand, PathCommandType, ShapeRecord
from slidemark.engine.text import escape_html
from slidemark.engine.tokens import TokenTables
from slidemark.engine.units import (
    DEFAULT_CURVATURE,
    DEFAULT_FILL,
    DEFAULT_H,
    DEFAULT_MARGIN,
    DEFAULT_STEM_SIZE,
    DEFAULT_STROKE,
    DEFAULT_STROKE_LINECAP,
    DEFAULT_STROKE_LINEJOIN,
    DEFAULT_STROKE_OPACITY,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_TIP_SIZE,
    DEFAULT_W,
    ELLIPSE_EPSILON,
    format_number,
    to_float,
)


@dataclass(frozen=True)
class PathParams:
    """Geometry parameters shared by the shape families."""

    margin: float = DEFAULT_MARGIN
    curvature: float = DEFAULT_CURVATURE
    tip_size: float = DEFAULT_TIP_SIZE
    stem_size: float = DEFAULT_STEM_SIZE

    @classmethod
    def from_shape(
        cls,
        shape: ShapeRecord,
        w: float,
        h: float,
        margin_ratio: float = 0.0,
    ) -> "PathParams":
        """Read parameters from a shape, defaulting absent ones.

        Args:
            shape: The merged shape.
            w: Box width.
            h: Box height.
            margin_ratio: Default margin as a fraction of min(w, h).
        """
        default_margin = min(w, h) * margin_ratio if margin_ratio else DEFAULT_MARGIN
        return cls(
            margin=to_float(shape.margin, default_margin),
            curvature=to_float(shape.curvature, DEFAULT_CURVATURE),
            tip_size=to_float(shape.tip_size, DEFAULT_TIP_SIZE),
            stem_size=to_float(shape.stem_size, DEFAULT_STEM_SIZE),
        )


# =============================================================================
# COMMAND HELPERS
# =============================================================================

def _move(x: float, y: float) -> PathCommand:
    return PathCommand(type=PathCommandType.MOVE_TO, x=x, y=y)


def _line(x: float, y: float) -> PathCommand:
    return PathCommand(type=PathCommandType.LINE_TO, x=x, y=y)


def _quad(x1: float, y1: float, x: float, y: float) -> PathCommand:
    return PathCommand(type=PathCommandType.QUAD_TO, x1=x1, y1=y1, x=x, y=y)


def _close() -> PathCommand:
    return PathCommand(type=PathCommandType.CLOSE)


def _polygon(*points: tuple[float, float]) -> list[PathCommand]:
    """Closed polygon through the given points."""
    first, *rest = points
    return [_move(*first), *(_line(*point) for point in rest), _close()]


# =============================================================================
# SHAPE FAMILIES
# =============================================================================

def _rectangle(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m = p.margin
    return _polygon((m, m), (w - m, m), (w - m, h - m), (m, h - m))


def _rounded_rectangle(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, c = p.margin, p.curvature
    return [
        _move(m + c, m),
        _line(w - m - c, m),
        _quad(w - m, m, w - m, m + c),
        _line(w - m, h - m - c),
        _quad(w - m, h - m, w - m - c, h - m),
        _line(m + c, h - m),
        _quad(m, h - m, m, h - m - c),
        _line(m, m + c),
        _quad(m, m, m + c, m),
        _close(),
    ]


def _ellipse(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m = p.margin
    # A single arc that stops just short of its start; a full 2*pi arc
    # with identical endpoints would be dropped by the SVG renderer.
    return [
        _move(w / 2, m),
        PathCommand(
            type=PathCommandType.ARC_TO,
            rx=w / 2 - m,
            ry=h / 2 - m,
            large_arc=True,
            sweep=True,
            x=w / 2 - ELLIPSE_EPSILON,
            y=m,
        ),
        _close(),
    ]


def _arrow_right(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, t, s = p.margin, p.tip_size, p.stem_size
    return _polygon(
        (m, h / 2 - s / 2),
        (w - t, h / 2 - s / 2),
        (w - t, m),
        (w - m, h / 2),
        (w - t, h - m),
        (w - t, h / 2 + s / 2),
        (m, h / 2 + s / 2),
    )


def _arrow_left(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, t, s = p.margin, p.tip_size, p.stem_size
    return _polygon(
        (w - m, h / 2 - s / 2),
        (t, h / 2 - s / 2),
        (t, m),
        (m, h / 2),
        (t, h - m),
        (t, h / 2 + s / 2),
        (w - m, h / 2 + s / 2),
    )


def _arrow_up(w: float, h: float, p: PathParams) -> list[PathCommand]:
    """Apex at the top edge (y = margin), stem down to the bottom.

    Older renderers drew arrow-up with the apex at h - margin and arrow-down
    the other way round; decks written against them will appear flipped.
    """
    m, t, s = p.margin, p.tip_size, p.stem_size
    return _polygon(
        (w / 2 - s / 2, h - m),
        (w / 2 + s / 2, h - m),
        (w / 2 + s / 2, t),
        (w - m, t),
        (w / 2, m),
        (m, t),
        (w / 2 - s / 2, t),
    )


def _arrow_down(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, t, s = p.margin, p.tip_size, p.stem_size
    return _polygon(
        (w / 2 - s / 2, m),
        (w / 2 + s / 2, m),
        (w / 2 + s / 2, h - t),
        (w - m, h - t),
        (w / 2, h - m),
        (m, h - t),
        (w / 2 - s / 2, h - t),
    )


def _diamond(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m = p.margin
    return _polygon((w / 2, m), (w - m, h / 2), (w / 2, h - m), (m, h / 2))


def _triangle(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m = p.margin
    return _polygon((w / 2, m), (w - m, h - m), (m, h - m))


def _hexagon(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m = p.margin
    inset = (w - 2 * m) * 0.25
    return _polygon(
        (m + inset, m),
        (w - m - inset, m),
        (w - m, h / 2),
        (w - m - inset, h - m),
        (m + inset, h - m),
        (m, h / 2),
    )


def _pentagon(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m = p.margin
    return _polygon(
        (w / 2, m),
        (w - m, h * 0.38),
        (w - m * 2, h - m),
        (m * 2, h - m),
        (m, h * 0.38),
    )


def chevron_tip(w: float, p: PathParams) -> float:
    """Notch depth, clamped so the outline cannot cross itself."""
    return min(p.tip_size, w - 2 * p.margin - 1)


def _chevron(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, t = p.margin, chevron_tip(w, p)
    return _polygon(
        (m, m),
        (w - t - m, m),
        (w - m, h / 2),
        (w - t - m, h - m),
        (m, h - m),
        (m + t, h / 2),
    )


def _chevron_start(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, t = p.margin, chevron_tip(w, p)
    return _polygon(
        (m, m),
        (w - t - m, m),
        (w - m, h / 2),
        (w - t - m, h - m),
        (m, h - m),
    )


def _speech_bubble(w: float, h: float, p: PathParams) -> list[PathCommand]:
    m, c = p.margin, p.curvature
    t = min(p.tip_size, h - 2 * m - 1)
    bottom = h - m - t
    return [
        _move(m + c, m),
        _line(w - m - c, m),
        _quad(w - m, m, w - m, m + c),
        _line(w - m, bottom - c),
        _quad(w - m, bottom, w - m - c, bottom),
        # Tail: base 0.3w..0.2w on the body, apex at 0.25w
        _line(w * 0.3, bottom),
        _line(w * 0.25, h - m),
        _line(w * 0.2, bottom),
        _line(m + c, bottom),
        _quad(m, bottom, m, bottom - c),
        _line(m, m + c),
        _quad(m, m, m + c, m),
        _close(),
    ]


PathBuilder = Callable[[float, float, PathParams], list[PathCommand]]

SHAPE_BUILDERS: dict[str, PathBuilder] = {
    "rectangle": _rectangle,
    "rounded-rectangle": _rounded_rectangle,
    "ellipse": _ellipse,
    "arrow-right": _arrow_right,
    "arrow-left": _arrow_left,
    "arrow-up": _arrow_up,
    "arrow-down": _arrow_down,
    "diamond": _diamond,
    "triangle": _triangle,
    "hexagon": _hexagon,
    "pentagon": _pentagon,
    "chevron": _chevron,
    "chevron-start": _chevron_start,
    "speech-bubble": _speech_bubble,
}

SHAPE_FAMILIES = frozenset(SHAPE_BUILDERS)


def is_shape_family(name: Optional[str]) -> bool:
    """True when name is a known vector family."""
    return name in SHAPE_FAMILIES


def build_path(
    family: str,
    w: float,
    h: float,
    params: Optional[PathParams] = None,
) -> Optional[list[PathCommand]]:
    """Build the closed outline for a family inside a w x h box.

    Returns:
        Path commands, or None for an unknown family.
    """
    builder = SHAPE_BUILDERS.get(family)
    if builder is None:
        return None
    return builder(w, h, params or PathParams())


def to_svg_path(commands: list[PathCommand]) -> str:
    """Serialise path commands to an SVG ``d`` string."""
    parts = []
    for cmd in commands:
        letter = cmd.type.value
        if cmd.type == PathCommandType.CLOSE:
            parts.append(letter)
        elif cmd.type == PathCommandType.QUAD_TO:
            parts.append(
                f"{letter}{format_number(cmd.x1)} {format_number(cmd.y1)} "
                f"{format_number(cmd.x)} {format_number(cmd.y)}"
            )
        elif cmd.type == PathCommandType.ARC_TO:
            parts.append(
                f"{letter}{format_number(cmd.rx)} {format_number(cmd.ry)} "
                f"{format_number(cmd.rotation)} {int(cmd.large_arc)} {int(cmd.sweep)} "
                f"{format_number(cmd.x)} {format_number(cmd.y)}"
            )
        else:
            parts.append(f"{letter}{format_number(cmd.x)} {format_number(cmd.y)}")
    return " ".join(parts)


# =============================================================================
# SVG RENDERER
# =============================================================================

class PathRenderer:
    """Renders a vector shape's ``<svg>`` element.

    The renderer is stateless; colors go through the call's token tables.
    """

    def __init__(self, tokens: TokenTables, margin_ratio: float = 0.0):
        """
        Initialize renderer.

        Args:
            tokens: Color/font tables for fill and stroke resolution
            margin_ratio: Default margin as a fraction of min(w, h)
        """
        self.tokens = tokens
        self.margin_ratio = margin_ratio

    def render_svg(self, shape: ShapeRecord, family: str) -> Optional[str]:
        """Render the svg for a shape, or None for an unknown family."""
        w = to_float(shape.w, DEFAULT_W)
        h = to_float(shape.h, DEFAULT_H)
        params = PathParams.from_shape(shape, w, h, self.margin_ratio)

        commands = build_path(family, w, h, params)
        if commands is None:
            return None

        fill = self.tokens.color(shape.fill or DEFAULT_FILL)
        path_attrs = (
            f'd="{escape_html(to_svg_path(commands))}" '
            f'fill="{escape_html(fill)}" {self._stroke_attributes(shape)}'
        )
        return (
            f'<svg viewBox="0 0 {format_number(w)} {format_number(h)}" preserveAspectRatio="none">\n'
            f"    <path {path_attrs}/>\n"
            f"  </svg>"
        )

    def _stroke_attributes(self, shape: ShapeRecord) -> str:
        """Stroke attributes; the extras only when a stroke is actually drawn."""
        stroke = self.tokens.color(shape.stroke or DEFAULT_STROKE)
        width = shape.stroke_width if shape.stroke_width is not None else DEFAULT_STROKE_WIDTH

        attrs = [
            f'stroke="{escape_html(stroke)}"',
            f'stroke-width="{escape_html(format_number(width))}"',
        ]
        if stroke != "none" and to_float(width) > 0:
            opacity = (
                shape.stroke_opacity
                if shape.stroke_opacity is not None
                else DEFAULT_STROKE_OPACITY
            )
            attrs.append(f'stroke-opacity="{escape_html(format_number(opacity))}"')
            attrs.append(
                f'stroke-linecap="{escape_html(shape.stroke_linecap or DEFAULT_STROKE_LINECAP)}"'
            )
            attrs.append(
                f'stroke-linejoin="{escape_html(shape.stroke_linejoin or DEFAULT_STROKE_LINEJOIN)}"'
            )
            if shape.stroke_dasharray:
                dasharray = format_number(shape.stroke_dasharray)
                attrs.append(f'stroke-dasharray="{escape_html(dasharray)}"')
        return " ".join(attrs)
