"""
overlay.py — Layered record overlay for the root < layout < slide cascade.

A layer is a partial record; layers are ordered lowest to highest precedence
and merged shallowly, field by field. Arrays are values like any other, so a
more specific ``items`` replaces the less specific one outright.

The same two utilities back shape maps (one record per shape id) and
backgrounds (a single record).
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from .units import to_float

logger = logging.getLogger(__name__)


ShapeRecords = dict[str, dict[str, Any]]


def overlay_fields(layers: Iterable[Optional[Mapping[str, Any]]]) -> dict[str, Any]:
    """Shallow-merge partial records, later layers winning per field.

    Args:
        layers: Partial records, lowest precedence first. None and
            non-mapping layers are skipped.

    Returns:
        A new dict; the input layers are never modified.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if isinstance(layer, Mapping):
            merged.update(layer)
    return merged


def overlay_records(
    layers: Iterable[Optional[Mapping[str, Mapping[str, Any]]]],
) -> ShapeRecords:
    """Merge keyed record maps, one resolved record per key.

    Keys first seen in a lower layer keep their position; keys first seen
    in a higher layer are appended in that layer's iteration order.

    Args:
        layers: Maps of key -> partial record, lowest precedence first.

    Returns:
        Map of key -> merged record (fresh dicts).
    """
    merged: ShapeRecords = {}
    for layer in layers:
        if not layer:
            continue
        for key, record in layer.items():
            if key in merged:
                merged[key] = overlay_fields([merged[key], record])
            else:
                merged[key] = dict(record)
    return merged


def shape_scope(shapes: Any) -> ShapeRecords:
    """Normalise one scope's shapes to a map of id -> record.

    Accepts a mapping (keys are the ids) or a list of records carrying
    ``id``; list records without an id get a positional ``shape-<n>`` key.
    Anything that is not a mapping record is ignored.
    """
    scope: ShapeRecords = {}
    if isinstance(shapes, Mapping):
        for key, record in shapes.items():
            if isinstance(record, Mapping):
                scope[str(key)] = dict(record)
            else:
                logger.debug(f"Ignoring non-mapping shape record {key!r}")
    elif isinstance(shapes, list):
        for index, record in enumerate(shapes):
            if not isinstance(record, Mapping):
                logger.debug(f"Ignoring non-mapping shape record at index {index}")
                continue
            shape_id = record.get("id")
            key = str(shape_id) if shape_id not in (None, "") else f"shape-{index}"
            if key in scope:
                scope[key] = overlay_fields([scope[key], record])
            else:
                scope[key] = dict(record)
    return scope


def merge_shapes(*scopes: Any) -> ShapeRecords:
    """Merge shape scopes (root, [master], layout, slide) by id.

    Args:
        *scopes: Shape maps or lists, lowest precedence first; None is empty.

    Returns:
        Map of shape id -> merged record, in merge-insertion order.
    """
    return overlay_records(shape_scope(scope) for scope in scopes)


def apply_overrides(shapes: ShapeRecords, overrides: Iterable[Any]) -> ShapeRecords:
    """Patch merged shapes with per-slide field overrides.

    Each override is a mapping whose ``shape`` names the target id; its
    other fields are laid over that record. Overrides naming an unknown
    shape are ignored.
    """
    patched = dict(shapes)
    for override in overrides or ():
        if not isinstance(override, Mapping):
            continue
        target = override.get("shape")
        if target is None or str(target) not in patched:
            continue
        fields = {key: value for key, value in override.items() if key != "shape"}
        patched[str(target)] = overlay_fields([patched[str(target)], fields])
    return patched


def z_value(record: Mapping[str, Any]) -> float:
    """Stacking value used for ordering; absent or non-numeric z is 0."""
    return to_float(record.get("z"), 0.0)


def sort_by_z(shapes: ShapeRecords) -> list[tuple[str, dict[str, Any]]]:
    """Ascending z order; ties keep merge-insertion order (sorted is stable)."""
    return sorted(shapes.items(), key=lambda item: z_value(item[1]))


def resolve_background(*layers: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Background cascade; same overlay as shapes, over a single record."""
    return overlay_fields(layers)
