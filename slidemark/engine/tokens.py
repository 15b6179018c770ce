"""
tokens.py — Symbolic color/font names resolved through theme tables.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping


def resolve_token(value: Any, table: Mapping[str, Any]) -> Any:
    """Return table[value] for a non-empty string key present in the table.

    Anything else (non-strings, empty strings, None, unknown keys) comes
    back unchanged.
    """
    if not isinstance(value, str) or not value:
        return value
    if value in table:
        return table[value]
    return value


@dataclass(frozen=True)
class TokenTables:
    """Read-only color and font tables for one render call.

    When ``enabled`` is False every lookup is a pass-through, which is how
    literal-only decks are rendered.
    """

    colors: Mapping[str, Any] = field(default_factory=dict)
    fonts: Mapping[str, Any] = field(default_factory=dict)
    enabled: bool = True

    def color(self, value: Any) -> Any:
        return resolve_token(value, self.colors) if self.enabled else value

    def font(self, value: Any) -> Any:
        return resolve_token(value, self.fonts) if self.enabled else value
