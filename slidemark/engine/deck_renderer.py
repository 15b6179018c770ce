"""
deck_renderer.py — Deck and slide assembly with a deck-scoped stylesheet.

This is the public entry point of the pipeline:

    deck -> resolve each slide's layout -> merge shapes root < layout < slide
         -> apply field overrides -> sort by z -> render each shape
         -> slide markup -> deck markup + scoped stylesheet

Rendering is a pure function of (deck, policy). Nothing here raises for bad
author input: a deck that cannot be read renders as "", a slide whose layout
cannot be resolved is skipped, a shape that cannot be read is skipped.
"""

import logging
import math
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from slidemark.dsl.schema import Deck, Layout, Master, Slide
from slidemark.renderer.shape_renderer import ShapeRenderer
from slidemark.renderer.style_renderer import StyleRenderer, style_attribute, to_style

from .overlay import apply_overrides, merge_shapes, resolve_background, sort_by_z, z_value
from .policy import RenderPolicy
from .text import escape_html
from .tokens import TokenTables
from .units import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_FONT_FAMILY,
    format_number,
)

logger = logging.getLogger(__name__)


SUPPORTED_MAJOR_VERSION = "1."

# Characters that could close a declaration, a rule or the <style> element
_CSS_UNSAFE = str.maketrans("", "", "<>{};")


def _css_safe(value: Any) -> str:
    return format_number(value).translate(_CSS_UNSAFE)


def _find_by_id(items: Iterable[Any], key: Optional[str]) -> Optional[Mapping[str, Any]]:
    """First mapping in items whose ``id`` matches key."""
    if key is None:
        return None
    for item in items:
        if isinstance(item, Mapping) and item.get("id") is not None and str(item["id"]) == key:
            return item
    return None


class DeckRenderer:
    """Renders decks to an embeddable HTML fragment.

    The renderer is stateless. Each render() call builds its own token
    tables and shape renderer from the deck it is given.
    """

    def __init__(self, policy: Optional[RenderPolicy] = None):
        """
        Initialize renderer.

        Args:
            policy: Convention switches; defaults to RenderPolicy.keyed()
        """
        self.policy = policy or RenderPolicy.keyed()

    def render(self, deck: Union[Deck, Mapping[str, Any], None]) -> str:
        """
        Render a deck to markup.

        Args:
            deck: Parsed deck data or a Deck model

        Returns:
            The deck fragment, or "" when there is nothing to render
        """
        model = self._read_deck(deck)
        if model is None or model.slides is None:
            return ""

        if self.policy.check_version and model.version:
            if not model.version.startswith(SUPPORTED_MAJOR_VERSION):
                logger.warning(f"Unsupported deck version {model.version!r}; nothing rendered")
                return ""

        tokens = TokenTables(
            colors=model.palette(),
            fonts=model.font_table(),
            enabled=self.policy.token_resolution,
        )
        shape_renderer = ShapeRenderer(self.policy, tokens)

        slides_html = "".join(
            self.render_slide(raw_slide, model, shape_renderer)
            for raw_slide in model.slides
        )

        return (
            f'<div class="{self.policy.deck_class}" data-deck-id="{escape_html(model.id or "")}">\n'
            f"  <style>{self.stylesheet(model)}</style>\n"
            f"  {slides_html}\n"
            f"</div>"
        )

    def _read_deck(self, deck: Any) -> Optional[Deck]:
        """
        Coerce input into a Deck.

        Invalid optional top-level fields are dropped so they fall back to
        their defaults; only unreadable ``slides`` makes the deck unreadable.
        """
        if isinstance(deck, Deck):
            return deck
        if not isinstance(deck, Mapping):
            return None

        data = dict(deck)
        invalid: set[str] = set()
        try:
            return Deck.model_validate(data)
        except ValidationError as e:
            invalid.update(str(error["loc"][0]) for error in e.errors() if error["loc"])

        if not invalid or "slides" in invalid:
            logger.warning("Unreadable deck: slides are missing or invalid")
            return None

        logger.warning(f"Ignoring invalid deck field(s): {', '.join(sorted(invalid))}")
        try:
            return Deck.model_validate({k: v for k, v in data.items() if k not in invalid})
        except ValidationError as e:
            logger.warning(f"Unreadable deck: {e.error_count()} invalid field(s)")
            return None

    # =========================================================================
    # SLIDES
    # =========================================================================

    def render_slide(
        self,
        raw_slide: Any,
        deck: Deck,
        shape_renderer: ShapeRenderer,
    ) -> str:
        """
        Render one slide, or "" when it cannot be resolved.

        Args:
            raw_slide: Slide data as found in deck.slides
            deck: The deck being rendered
            shape_renderer: Shape renderer bound to this render call
        """
        try:
            slide = Slide.model_validate(raw_slide)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable slide: {e.error_count()} invalid field(s)")
            return ""

        resolved = self.resolve_layout(slide, deck)
        if resolved is None:
            logger.warning(
                f"Skipping slide {slide.id!r}: layout {slide.layout!r} "
                f"(master {slide.master!r}) not found"
            )
            return ""
        master, layout = resolved

        merged = merge_shapes(
            deck.shapes,
            master.shapes if master else None,
            layout.shapes,
            slide.shapes,
        )
        merged = apply_overrides(merged, slide.overrides)
        ordered = sort_by_z(merged)

        shapes_html = "".join(
            shape_renderer.render(shape_id, record, slide.meta)
            for shape_id, record in ordered
        )

        background = self.resolve_background(deck, master, layout, slide)
        try:
            bg_declarations = StyleRenderer().background(background)
        except ValidationError:
            logger.warning(f"Ignoring unreadable background on slide {slide.id!r}")
            bg_declarations = []

        slide_id = escape_html(slide.id or "")
        if self.policy.background_mode == "layer":
            layer = ""
            if bg_declarations:
                bg_z = self._background_z(record for _, record in ordered)
                layer = (
                    f'<div class="background" '
                    f'{style_attribute(bg_declarations + [("z-index", bg_z)])}></div>'
                )
            return f'<div class="slide" data-slide-id="{slide_id}">{layer}{shapes_html}</div>'

        return (
            f'<div class="slide" data-slide-id="{slide_id}" {style_attribute(bg_declarations)}>'
            f"{shapes_html}</div>"
        )

    def resolve_layout(
        self,
        slide: Slide,
        deck: Deck,
    ) -> Optional[tuple[Optional[Master], Layout]]:
        """
        Find the slide's layout under the policy's lookup convention.

        Returns:
            (master, layout); master is None for map lookups. None when the
            reference does not resolve.
        """
        try:
            if self.policy.layout_lookup == "master_list":
                raw_master = _find_by_id(deck.masters, slide.master)
                if raw_master is None:
                    return None
                master = Master.model_validate(raw_master)
                raw_layout = _find_by_id(master.layouts, slide.layout)
                if raw_layout is None:
                    return None
                return master, Layout.model_validate(raw_layout)

            layouts = deck.layouts
            if isinstance(layouts, Mapping):
                raw_layout = layouts.get(slide.layout) if slide.layout is not None else None
            else:
                raw_layout = _find_by_id(layouts or [], slide.layout)
            if not isinstance(raw_layout, Mapping):
                return None
            return None, Layout.model_validate(raw_layout)
        except ValidationError as e:
            logger.warning(f"Unreadable layout for slide {slide.id!r}: {e.error_count()} invalid field(s)")
            return None

    def resolve_background(
        self,
        deck: Deck,
        master: Optional[Master],
        layout: Layout,
        slide: Slide,
    ) -> dict[str, Any]:
        """Background cascade: deck < master (when inherited) < layout < slide."""
        layers: list[Optional[Mapping[str, Any]]] = [deck.bg]
        if master is not None and layout.bg and layout.bg.get("inherit"):
            layers.append(master.bg)
        layers.extend([layout.bg, slide.bg])

        background = resolve_background(*layers)
        background.pop("inherit", None)
        return background

    @staticmethod
    def _background_z(records: Iterable[Mapping[str, Any]]) -> int:
        """One below the lowest shape z, and never above -1."""
        lowest = min(
            (z_value(record) for record in records if record.get("z") is not None),
            default=0.0,
        )
        return min(-1, math.floor(lowest) - 1)

    # =========================================================================
    # STYLESHEET
    # =========================================================================

    def stylesheet(self, deck: Deck) -> str:
        """
        Stylesheet scoped to the deck class.

        Theme values are stripped of characters that could escape their
        declaration.
        """
        scope = f".{self.policy.deck_class}"
        size = deck.slide_size
        body_font = deck.font_table().get("body") or DEFAULT_FONT_FAMILY
        slide_bg = deck.palette().get("bg") or DEFAULT_BACKGROUND_COLOR
        unit = _css_safe(size.unit)

        full_bleed = [("position", "absolute"), ("top", "0"), ("left", "0"),
                      ("width", "100%"), ("height", "100%")]

        rules = [
            (f"{scope} *", [("margin", "0"), ("padding", "0"), ("box-sizing", "border-box")]),
            (scope, [("font-family", f"{_css_safe(body_font)}, sans-serif")]),
            (f"{scope} .slide", [
                ("width", f"{_css_safe(size.w)}{unit}"),
                ("height", f"{_css_safe(size.h)}{unit}"),
                ("position", "relative"),
                ("overflow", "hidden"),
                ("isolation", "isolate"),
                ("background", _css_safe(slide_bg)),
            ]),
            (f"{scope} .background", full_bleed),
            (f"{scope} .shape", [("position", "absolute")]),
            (f"{scope} .text-shape", [
                ("display", "flex"),
                ("align-items", "flex-start"),
                ("justify-content", "flex-start"),
                ("overflow-wrap", "break-word"),
            ]),
            (f"{scope} .image-shape img", [
                ("width", "100%"),
                ("height", "100%"),
                ("object-fit", "contain"),
            ]),
            (f"{scope} .list-shape", [("display", "flex")]),
            (f"{scope} .list-shape ul", [("list-style", "none")]),
            (f"{scope} .list-shape li", [("margin-bottom", "0.5em")]),
            (f"{scope} .svg-shape svg", full_bleed),
            (f"{scope} .svg-shape .text-shape", full_bleed + [
                ("align-items", "center"),
                ("justify-content", "center"),
                ("padding", "8px"),
            ]),
        ]

        lines = [f"    {selector} {{ {to_style(declarations)} }}" for selector, declarations in rules]
        return "\n" + "\n".join(lines) + "\n  "


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def render_deck(
    deck: Union[Deck, Mapping[str, Any], None],
    policy: Optional[RenderPolicy] = None,
) -> str:
    """
    Render a deck to an embeddable HTML fragment.

    Args:
        deck: Parsed deck data (e.g. from json.loads) or a Deck model
        policy: Convention switches; defaults to RenderPolicy.keyed()

    Returns:
        The fragment, or "" for a missing deck, a deck without slides or an
        unsupported version
    """
    return DeckRenderer(policy).render(deck)
