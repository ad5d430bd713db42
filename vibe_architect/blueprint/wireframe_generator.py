"""Screen wireframe generation.

Component selection may come from a model, but geometry always comes from the
layout engine.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from vibe_architect.blueprint.layout import DEFAULT_CANVAS, Canvas, Shape, layout
from vibe_architect.blueprint.models import DataEntity, UserStory
from vibe_architect.blueprint.prompts import (
    build_wireframe_system_prompt,
    build_wireframe_user_prompt,
)
from vibe_architect.blueprint.providers.base import LLMProvider

logger = logging.getLogger(__name__)


def draft_components(screen_name: str | None, entities: Sequence[DataEntity]) -> list[Shape]:
    """Navbar, sidebar and a table-centred content area for any screen."""
    table_label = f"{entities[0].name} List" if entities else "Data Table"
    return [
        Shape(type="navbar", label="Navigation Bar"),
        Shape(type="sidebar", label="Sidebar"),
        Shape(type="container", label="Main Content"),
        Shape(type="card", label=f"{screen_name or 'Screen'} Header"),
        Shape(type="data-table", label=table_label),
    ]


class WireframeGenerator:
    """Produces positioned wireframe shapes for a screen."""

    def __init__(
        self, provider: LLMProvider | None = None, canvas: Canvas = DEFAULT_CANVAS
    ) -> None:
        self.provider = provider
        self.canvas = canvas

    def generate(
        self,
        screen_name: str | None,
        entities: Sequence[DataEntity] = (),
        stories: Sequence[UserStory] = (),
    ) -> list[Shape]:
        if self.provider is None:
            components = draft_components(screen_name, entities)
        else:
            response = self.provider.generate_json(
                system_prompt=build_wireframe_system_prompt(),
                user_prompt=build_wireframe_user_prompt(
                    screen_name or "Screen", entities, stories
                ),
            )
            components = self._parse(response)
        shapes = layout(components, self.canvas)
        logger.info("Laid out %s components for screen %r.", len(shapes), screen_name)
        return shapes

    def _parse(self, response: dict[str, Any]) -> list[Shape]:
        raw = response.get("components")
        if not isinstance(raw, list):
            raise ValueError("Model output must include a 'components' list.")
        shapes: list[Shape] = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                raise ValueError(f"Expected 'components[{index}]' to be an object.")
            shapes.append(Shape.from_dict(item))
        return shapes
