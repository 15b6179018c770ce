"""
text.py — Placeholder interpolation and markup escaping for slide text.

Interpolation always runs first so substituted values are escaped with the
rest of the text.
"""

import re
from typing import Any, Mapping

from .units import format_number


PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")

# Order matters: "&" first so later entities are not escaped twice
ESCAPE_TABLE = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def interpolate(text: str, meta: Mapping[str, Any]) -> str:
    """Replace ``{key}`` placeholders with values from meta.

    Unknown keys (and keys whose value is None) keep their literal
    placeholder. Substituted values are not interpolated again.

    Args:
        text: Source text.
        meta: Per-slide metadata.

    Returns:
        The interpolated text.
    """
    def _substitute(match: re.Match) -> str:
        key = match.group(1)
        value = meta.get(key)
        if value is None:
            return match.group(0)
        return format_number(value)

    return PLACEHOLDER_PATTERN.sub(_substitute, str(text))


def escape_html(text: Any) -> str:
    """Escape text for markup content and double-quoted attribute values."""
    result = str(text)
    for char, entity in ESCAPE_TABLE:
        result = result.replace(char, entity)
    return result
