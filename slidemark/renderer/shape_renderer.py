"""Render merged shape records to markup.

Dispatch is over a closed set of kinds: ``text``, ``image``, ``list`` and
``vector`` (one of the path families). A record whose ``type`` is missing or
not recognised becomes a vector of the policy's fallback family when one is
configured, and renders nothing otherwise. Vector shapes whose family has no
outline are omitted entirely.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from slidemark.dsl.schema import ShapeKind, ShapeRecord
from slidemark.engine.policy import RenderPolicy
from slidemark.engine.text import escape_html, interpolate
from slidemark.engine.tokens import TokenTables
from slidemark.engine.units import format_number
from slidemark.renderer.path_renderer import PathRenderer, is_shape_family
from slidemark.renderer.style_renderer import StyleRenderer, style_attribute

logger = logging.getLogger(__name__)


BASIC_KINDS = {
    "text": ShapeKind.TEXT,
    "image": ShapeKind.IMAGE,
    "list": ShapeKind.LIST,
}


class ShapeRenderer:
    """Renders one shape at a time; holds no per-render state."""

    def __init__(self, policy: RenderPolicy, tokens: TokenTables):
        """Initialize the renderer.

        Args:
            policy: Convention switches (fallback family, margin ratio).
            tokens: Theme tables for color and font resolution.
        """
        self.policy = policy
        self.styles = StyleRenderer(tokens)
        self.paths = PathRenderer(tokens, margin_ratio=policy.margin_ratio)

    def classify(self, shape: ShapeRecord) -> Optional[tuple[ShapeKind, Optional[str]]]:
        """Resolve a shape's kind and, for vectors, its family.

        Args:
            shape: The merged shape.

        Returns:
            (kind, family) or None when the shape should not render.
        """
        if shape.type in BASIC_KINDS:
            return BASIC_KINDS[shape.type], None
        if is_shape_family(shape.type):
            return ShapeKind.VECTOR, shape.type
        if self.policy.fallback_family is not None:
            return ShapeKind.VECTOR, self.policy.fallback_family
        return None

    def render(
        self,
        shape_id: str,
        record: Mapping[str, Any],
        meta: Mapping[str, Any],
    ) -> str:
        """Render a merged shape record.

        Args:
            shape_id: Key of the shape in the merged map.
            record: The merged record.
            meta: Slide metadata for text interpolation.

        Returns:
            Markup for the shape, or "" when it contributes nothing.
        """
        try:
            shape = ShapeRecord.model_validate(record)
        except ValidationError as e:
            logger.debug(f"Skipping shape {shape_id!r}: {e.error_count()} invalid field(s)")
            return ""

        resolved = self.classify(shape)
        if resolved is None:
            logger.debug(f"Skipping shape {shape_id!r} with unknown type {shape.type!r}")
            return ""
        kind, family = resolved

        data_attrs = (
            f'data-shape-id="{escape_html(shape_id)}" '
            f'data-shape-type="{escape_html(shape.type or "")}"'
        )

        if kind == ShapeKind.TEXT:
            return self.render_text(shape, data_attrs, meta)
        if kind == ShapeKind.IMAGE:
            return self.render_image(shape, data_attrs)
        if kind == ShapeKind.LIST:
            return self.render_list(shape, data_attrs, meta)
        return self.render_vector(shape, family, data_attrs, meta)

    # =========================================================================
    # TYPE RENDERERS
    # =========================================================================

    def render_text(
        self,
        shape: ShapeRecord,
        data_attrs: str,
        meta: Mapping[str, Any],
    ) -> str:
        """Render a free text block (default alignment left/top)."""
        text = interpolate(shape.text or "", meta)
        declarations = (
            self.styles.box(shape)
            + self.styles.shape_alignment(shape, "left", "top")
            + self.styles.text(shape)
        )
        return (
            f'<div class="shape text-shape" {data_attrs} {style_attribute(declarations)}>'
            f"{escape_html(text)}</div>"
        )

    def render_image(self, shape: ShapeRecord, data_attrs: str) -> str:
        """Render an image; object-fit only when the shape asks for one."""
        fit = [("object-fit", shape.image_fit)] if shape.image_fit else []
        return (
            f'<div class="shape image-shape" {data_attrs} {style_attribute(self.styles.box(shape))}>\n'
            f'    <img src="{escape_html(shape.image_src or "")}" '
            f'alt="{escape_html(shape.alt or "")}" {style_attribute(fit)}>\n'
            f"  </div>"
        )

    def render_list(
        self,
        shape: ShapeRecord,
        data_attrs: str,
        meta: Mapping[str, Any],
    ) -> str:
        """Render list items with a shared text style (default left/middle)."""
        prefix = f"{shape.bullet} " if shape.bullet else ""
        item_style = style_attribute(self.styles.text(shape))

        items = "".join(
            f"<li {item_style}>{escape_html(interpolate(prefix + format_number(item), meta))}</li>"
            for item in shape.items
        )
        declarations = self.styles.box(shape) + self.styles.shape_alignment(shape, "left", "middle")
        return (
            f'<div class="shape list-shape" {data_attrs} {style_attribute(declarations)}>'
            f"<ul>{items}</ul></div>"
        )

    def render_vector(
        self,
        shape: ShapeRecord,
        family: str,
        data_attrs: str,
        meta: Mapping[str, Any],
    ) -> str:
        """Render a vector outline with an optional text overlay."""
        svg = self.paths.render_svg(shape, family)
        if svg is None:
            logger.debug(f"No outline for vector family {family!r}; shape omitted")
            return ""

        overlay = ""
        text = interpolate(shape.text, meta) if shape.text else ""
        if text:
            declarations = (
                self.styles.shape_alignment(shape, "center", "middle")
                + (self.styles.text(shape) or [("text-align", "center")])
            )
            overlay = (
                f'<div class="shape text-shape" {style_attribute(declarations)}>'
                f"{escape_html(text)}</div>"
            )

        return (
            f'<div class="shape svg-shape" {data_attrs} {style_attribute(self.styles.box(shape))}>'
            f"{svg}{overlay}</div>"
        )
