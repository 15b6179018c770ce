# Slidemark render engine

from .units import (
    DEFAULT_SLIDE_WIDTH,
    DEFAULT_SLIDE_HEIGHT,
    format_number,
)

from .policy import RenderPolicy

from .tokens import (
    resolve_token,
    TokenTables,
)

from .text import (
    escape_html,
    interpolate,
)

from .overlay import (
    overlay_fields,
    overlay_records,
    merge_shapes,
    apply_overrides,
    sort_by_z,
    resolve_background,
)

from .deck_renderer import (
    DeckRenderer,
    render_deck,
)
