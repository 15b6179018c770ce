"""
units.py — Defaults and number formatting for emitted CSS/SVG.

This is the foundation module. Every default that the renderers fall back to
lives here, and every number written into markup goes through format_number().
"""

import math
from typing import Any

# =============================================================================
# SLIDE DIMENSIONS (16:9 at 1280 wide)
# =============================================================================

DEFAULT_SLIDE_WIDTH = 1280
DEFAULT_SLIDE_HEIGHT = 720
DEFAULT_SLIDE_UNIT = "px"

# =============================================================================
# SHAPE GEOMETRY DEFAULTS
# =============================================================================

DEFAULT_X = 0
DEFAULT_Y = 0
DEFAULT_W = 100
DEFAULT_H = 100
DEFAULT_SHAPE_UNIT = "%"

# =============================================================================
# VECTOR SHAPE DEFAULTS
# =============================================================================

DEFAULT_MARGIN = 0
DEFAULT_CURVATURE = 10
DEFAULT_TIP_SIZE = 20
DEFAULT_STEM_SIZE = 40

# Ellipse arcs end this far short of their start so the arc is not degenerate
ELLIPSE_EPSILON = 0.1

DEFAULT_FILL = "#2563eb"
DEFAULT_STROKE = "none"
DEFAULT_STROKE_WIDTH = 0
DEFAULT_STROKE_OPACITY = 1
DEFAULT_STROKE_LINECAP = "butt"
DEFAULT_STROKE_LINEJOIN = "miter"

# =============================================================================
# THEME DEFAULTS
# =============================================================================

DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_BACKGROUND_SIZE = "cover"

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def is_number(value: Any) -> bool:
    """True for ints and floats, False for bools and everything else."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: Any) -> str:
    """Format a value for CSS/SVG output.

    Integral floats drop their fractional part (10.0 -> "10") and other
    floats use the shortest round-trip repr (0.1 + 0.2 stays exact enough
    for a path). Lists and tuples are joined with "," ([4, 2] -> "4,2").
    Anything else is converted with str().
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(format_number(item) for item in value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def to_float(value: Any, default: float = 0.0) -> float:
    """Best-effort numeric coercion, falling back to default for non-finite values."""
    if is_number(value):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value)
        except ValueError:
            return default
    else:
        return default
    return result if math.isfinite(result) else default
