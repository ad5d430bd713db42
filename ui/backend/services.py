"""Service layer between API payloads and the blueprint generators."""

from __future__ import annotations

from typing import Any

from vibe_architect.blueprint.erd_generator import DataModel, ErdGenerator
from vibe_architect.blueprint.flow_generator import FlowGenerator, UserFlow
from vibe_architect.blueprint.layout import Shape, layout_records
from vibe_architect.blueprint.models import DataEntity, UserStory
from vibe_architect.blueprint.providers.base import LLMProvider
from vibe_architect.blueprint.story_extractor import StoryExtractor
from vibe_architect.blueprint.wireframe_generator import WireframeGenerator


def _parse_stories(raw: list[dict[str, Any]]) -> list[UserStory]:
    return [UserStory.from_dict(item) for item in raw]


def _parse_entities(raw: list[dict[str, Any]]) -> list[DataEntity]:
    return [DataEntity.from_dict(item) for item in raw]


def _screen_name(screen: str | dict[str, Any] | None) -> str | None:
    """Accept a bare screen name or a screen object with a ``name`` field."""
    if isinstance(screen, dict):
        screen = screen.get("name")
    if screen is not None and not isinstance(screen, str):
        raise ValueError("Expected 'screen.name' to be a string.")
    return screen or None


class BlueprintService:
    """Adapter that converts JSON payloads to domain values and back."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        self.provider = provider
        self._stories = StoryExtractor(provider)
        self._flow = FlowGenerator(provider)
        self._erd = ErdGenerator(provider)
        self._wireframes = WireframeGenerator(provider)

    def extract_stories(self, prd: str) -> list[dict[str, Any]]:
        return [story.to_dict() for story in self._stories.extract(prd)]

    def generate_flow(self, stories: list[dict[str, Any]]) -> UserFlow:
        return self._flow.generate(_parse_stories(stories))

    def generate_erd(self, stories: list[dict[str, Any]]) -> DataModel:
        return self._erd.generate(_parse_stories(stories))

    def generate_wireframe(
        self,
        screen: str | dict[str, Any] | None,
        entities: list[dict[str, Any]],
        stories: list[dict[str, Any]],
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Generate positioned shape records and their component JSON form for a screen."""
        shapes = self._wireframes.generate(
            _screen_name(screen), _parse_entities(entities), _parse_stories(stories)
        )
        return (
            [shape.to_dict() for shape in shapes],
            [_component_record(index, shape) for index, shape in enumerate(shapes)],
        )

    def layout(self, shapes: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return layout_records(shapes)


def _component_record(index: int, shape: Shape) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": f"comp-{index}",
        "type": shape.type,
        "label": shape.label,
        "position": {"x": shape.x, "y": shape.y},
        "size": {"width": shape.width, "height": shape.height},
    }
    props = shape.extra.get("props")
    if isinstance(props, dict):
        record["props"] = props
    return record
