"""Deterministic wireframe layout engine.

Turns an unordered list of semantically typed shapes into positioned shapes on
a fixed-width canvas. Geometry supplied by callers is discarded; only ``type``
and ``label`` drive placement. Navbar and sidebar are carved out first, then
runs of adjacent same-typed shapes are placed group by group below a vertical
cursor.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

NAVBAR_HEIGHT = 56.0
SIDEBAR_WIDTH = 200.0
SIDEBAR_HEIGHT = 712.0
MODAL_WIDTH = 400.0
MODAL_HEIGHT = 300.0
BUTTON_HEIGHT = 40.0
BUTTON_MIN_WIDTH = 100.0
BUTTON_CHAR_WIDTH = 9.0
BUTTON_PADDING = 32.0
INPUT_MAX_WIDTH = 400.0
DEFAULT_HEIGHT = 60.0

_GEOMETRY_KEYS = ("type", "label", "x", "y", "width", "height")


class ShapeKind(str, Enum):
    """Recognized semantic component types."""

    navbar = "navbar"
    sidebar = "sidebar"
    data_table = "data-table"
    form = "form"
    card = "card"
    list = "list"
    button = "button"
    input = "input"
    chart = "chart"
    modal = "modal"
    text = "text"
    image = "image"
    container = "container"

    @classmethod
    def parse(cls, value: str) -> ShapeKind | None:
        """Return the kind for a raw type string, or None when unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Canvas:
    """Logical canvas dimensions and inter-element spacing."""

    width: float = 1024.0
    height: float = 768.0
    gap: float = 16.0


DEFAULT_CANVAS = Canvas()


def _as_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class Shape:
    """A typed, labeled UI element with a bounding box."""

    type: str
    label: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    extra: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def kind(self) -> ShapeKind | None:
        """Recognized kind of this shape, if any."""
        return ShapeKind.parse(self.type)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def moved(self, x: float, y: float, width: float, height: float) -> Shape:
        """Return a copy with new geometry and an unshared ``extra`` mapping."""
        return replace(self, x=x, y=y, width=width, height=height, extra=dict(self.extra))

    def overlaps(self, other: Shape) -> bool:
        """Whether the two rectangles share interior area."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Shape:
        """Build a shape from a JSON record, keeping unknown fields in ``extra``.

        Parsing is lenient: the engine accepts any record and never raises.
        """
        raw_type = data.get("type")
        raw_label = data.get("label")
        return cls(
            type="" if raw_type is None else str(raw_type),
            label="" if raw_label is None else str(raw_label),
            x=_as_float(data.get("x", 0.0)),
            y=_as_float(data.get("y", 0.0)),
            width=_as_float(data.get("width", 0.0)),
            height=_as_float(data.get("height", 0.0)),
            extra={key: value for key, value in data.items() if key not in _GEOMETRY_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON record, re-merging pass-through fields."""
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "type": self.type,
                "label": self.label,
                "x": self.x,
                "y": self.y,
                "width": self.width,
                "height": self.height,
            }
        )
        return payload


@dataclass(frozen=True)
class ContentArea:
    """Region left for flowing content once structural elements are reserved."""

    x: float
    y: float
    width: float

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class Placement:
    """Shapes emitted by one group and the cursor position after it."""

    shapes: tuple[Shape, ...]
    cursor: float


PlacementRule = Callable[[Sequence[Shape], float, ContentArea, Canvas], Placement]


def place_grid(
    items: Sequence[Shape],
    *,
    x: float,
    y: float,
    item_width: float,
    item_height: float,
    columns: int,
    gap: float,
) -> list[Shape]:
    """Place items row-major on a uniform grid starting at ``(x, y)``."""
    columns = max(1, columns)
    placed: list[Shape] = []
    for index, item in enumerate(items):
        row, col = divmod(index, columns)
        placed.append(
            item.moved(
                x + col * (item_width + gap),
                y + row * (item_height + gap),
                item_width,
                item_height,
            )
        )
    return placed


def column_width(area_width: float, columns: int, gap: float) -> float:
    """Width of one column when ``columns`` share ``area_width`` with gaps."""
    return (area_width - gap * (columns - 1)) / columns


def button_width(label: str) -> float:
    """Approximate rendered button width from its label length."""
    return max(BUTTON_MIN_WIDTH, len(label) * BUTTON_CHAR_WIDTH + BUTTON_PADDING)


def _stack(item_height: float) -> PlacementRule:
    """Single full-width column, one item per row."""

    def rule(group: Sequence[Shape], cursor: float, area: ContentArea, canvas: Canvas) -> Placement:
        placed = place_grid(
            group,
            x=area.x,
            y=cursor,
            item_width=area.width,
            item_height=item_height,
            columns=1,
            gap=canvas.gap,
        )
        return Placement(tuple(placed), cursor + len(group) * (item_height + canvas.gap))

    return rule


def _grid(item_height: float, max_columns: int) -> PlacementRule:
    """Row-major grid using up to ``max_columns`` equal columns."""

    def rule(group: Sequence[Shape], cursor: float, area: ContentArea, canvas: Canvas) -> Placement:
        columns = min(len(group), max_columns)
        placed = place_grid(
            group,
            x=area.x,
            y=cursor,
            item_width=column_width(area.width, columns, canvas.gap),
            item_height=item_height,
            columns=columns,
            gap=canvas.gap,
        )
        rows = math.ceil(len(group) / columns)
        return Placement(tuple(placed), cursor + rows * (item_height + canvas.gap))

    return rule


def _place_inputs(
    group: Sequence[Shape], cursor: float, area: ContentArea, canvas: Canvas
) -> Placement:
    height = 44.0
    if len(group) == 1:
        columns = 1
        width = min(INPUT_MAX_WIDTH, area.width)
    else:
        columns = 2
        width = column_width(area.width, columns, canvas.gap)
    placed = place_grid(
        group,
        x=area.x,
        y=cursor,
        item_width=width,
        item_height=height,
        columns=columns,
        gap=canvas.gap,
    )
    rows = math.ceil(len(group) / columns)
    return Placement(tuple(placed), cursor + rows * (height + canvas.gap))


def _button_rows(widths: Sequence[float], area_width: float, gap: float) -> list[list[int]]:
    """Split button indices into rows, in input order, that fit ``area_width``."""
    rows: list[list[int]] = [[]]
    row_width = 0.0
    for index, width in enumerate(widths):
        needed = row_width + gap + width if rows[-1] else width
        if rows[-1] and needed > area_width:
            rows.append([])
            needed = width
        rows[-1].append(index)
        row_width = needed
    return rows


def _place_buttons(
    group: Sequence[Shape], cursor: float, area: ContentArea, canvas: Canvas
) -> Placement:
    # Each row is sized from the right edge inward; a row wider than the
    # content area wraps onto the next row. Shapes are emitted in input order.
    widths = [min(button_width(shape.label), area.width) for shape in group]
    rows = _button_rows(widths, area.width, canvas.gap)
    placed: list[Shape] = list(group)
    for row_number, row in enumerate(rows):
        y = cursor + row_number * (BUTTON_HEIGHT + canvas.gap)
        right_edge = area.right
        for index in reversed(row):
            right_edge -= widths[index]
            placed[index] = group[index].moved(right_edge, y, widths[index], BUTTON_HEIGHT)
            right_edge -= canvas.gap
    return Placement(tuple(placed), cursor + len(rows) * (BUTTON_HEIGHT + canvas.gap))


def _place_modals(
    group: Sequence[Shape], cursor: float, area: ContentArea, canvas: Canvas
) -> Placement:
    x = canvas.width / 2 - MODAL_WIDTH / 2
    y = canvas.height / 2 - MODAL_HEIGHT / 2
    placed = tuple(shape.moved(x, y, MODAL_WIDTH, MODAL_HEIGHT) for shape in group)
    return Placement(placed, cursor)


_RULES: dict[ShapeKind, PlacementRule] = {
    ShapeKind.container: _stack(48.0),
    ShapeKind.data_table: _stack(280.0),
    ShapeKind.list: _stack(280.0),
    ShapeKind.form: _grid(280.0, 2),
    ShapeKind.card: _grid(120.0, 3),
    ShapeKind.chart: _grid(220.0, 2),
    ShapeKind.input: _place_inputs,
    ShapeKind.image: _grid(180.0, 3),
    ShapeKind.button: _place_buttons,
    ShapeKind.text: _stack(32.0),
    ShapeKind.modal: _place_modals,
}
_DEFAULT_RULE = _stack(DEFAULT_HEIGHT)


def rule_for(shape_type: str) -> PlacementRule:
    """Placement rule for a raw type string; unknown types use the default stack."""
    kind = ShapeKind.parse(shape_type)
    if kind is None:
        return _DEFAULT_RULE
    return _RULES.get(kind, _DEFAULT_RULE)


def _first_index(shapes: Sequence[Shape], kind: ShapeKind) -> int | None:
    for index, shape in enumerate(shapes):
        if shape.type == kind.value:
            return index
    return None


def layout(shapes: Iterable[Shape], canvas: Canvas = DEFAULT_CANVAS) -> list[Shape]:
    """Compute positions for every shape.

    The first navbar spans the top strip and the first sidebar the left strip;
    both are emitted first. Remaining shapes keep their relative order and are
    laid out one adjacency group at a time inside the content area.
    """
    shapes = list(shapes)
    navbar_index = _first_index(shapes, ShapeKind.navbar)
    sidebar_index = _first_index(shapes, ShapeKind.sidebar)

    result: list[Shape] = []
    top = 0.0
    left = 0.0
    if navbar_index is not None:
        result.append(shapes[navbar_index].moved(0.0, 0.0, canvas.width, NAVBAR_HEIGHT))
        top = NAVBAR_HEIGHT
    if sidebar_index is not None:
        result.append(shapes[sidebar_index].moved(0.0, top, SIDEBAR_WIDTH, SIDEBAR_HEIGHT))
        left = SIDEBAR_WIDTH

    area = ContentArea(
        x=left + canvas.gap,
        y=top + canvas.gap,
        width=canvas.width - left - 2 * canvas.gap,
    )
    content = [
        shape
        for index, shape in enumerate(shapes)
        if index not in (navbar_index, sidebar_index)
    ]

    cursor = area.y
    group_count = 0
    for shape_type, run in itertools.groupby(content, key=lambda shape: shape.type):
        group = list(run)
        placement = rule_for(shape_type)(group, cursor, area, canvas)
        result.extend(placement.shapes)
        cursor = placement.cursor
        group_count += 1

    logger.debug(
        "Laid out %s shapes in %s content groups (content bottom %.1f).",
        len(result),
        group_count,
        cursor,
    )
    return result


def layout_records(
    records: Iterable[Mapping[str, Any]],
    canvas: Canvas = DEFAULT_CANVAS,
) -> list[dict[str, Any]]:
    """Lay out JSON shape records, passing through every non-geometry field."""
    shapes = [Shape.from_dict(item) for item in records]
    return [shape.to_dict() for shape in layout(shapes, canvas)]
