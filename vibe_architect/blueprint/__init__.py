"""Blueprint domain: layout engine, models, state and generators."""

from vibe_architect.blueprint.layout import (
    DEFAULT_CANVAS,
    Canvas,
    Shape,
    ShapeKind,
    layout,
    layout_records,
    place_grid,
)

__all__ = [
    "DEFAULT_CANVAS",
    "Canvas",
    "Shape",
    "ShapeKind",
    "layout",
    "layout_records",
    "place_grid",
]
