"""Data models for the semantic blueprint produced from a requirements document."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from vibe_architect.blueprint.layout import Shape

PRIORITIES = ("P0", "P1", "P2", "P3")
FLOW_NODE_TYPES = ("screen", "action", "decision", "start", "end")
FLOW_EDGE_TYPES = ("navigation", "conditional", "action")
ATTRIBUTE_TYPES = ("string", "number", "boolean", "date", "reference", "array")
RELATIONSHIP_TYPES = ("one-to-one", "one-to-many", "many-to-many")


class Phase(str, Enum):
    """Workflow phase of the blueprint editor."""

    stories = "stories"
    architecture = "architecture"
    design = "design"
    export = "export"


def new_id() -> str:
    """Return a fresh random identifier."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


def screen_path(label: str) -> str:
    """Route path derived from a screen label, e.g. 'Main Feature' -> '/main-feature'."""
    return "/" + re.sub(r"\s+", "-", label.strip().lower())


def _require_string(value: Any, field_name: str) -> str:
    """Validate and return a non-empty string."""
    if not isinstance(value, str):
        raise ValueError(f"Expected '{field_name}' to be a string.")
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"Expected '{field_name}' to be non-empty.")
    return cleaned


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected '{field_name}' to be a string.")
    return value.strip() or None


def _require_string_list(value: Any, field_name: str) -> list[str]:
    """Validate a list of non-empty strings."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Expected '{field_name}' to be a list.")
    return [_require_string(item, f"{field_name}[{index}]") for index, item in enumerate(value)]


def _require_choice(value: Any, field_name: str, allowed: tuple[str, ...]) -> str:
    cleaned = _require_string(value, field_name)
    if cleaned not in allowed:
        raise ValueError(f"Expected '{field_name}' to be one of: {', '.join(allowed)}.")
    return cleaned


def _require_bool(value: Any, field_name: str, default: bool = False) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Expected '{field_name}' to be a boolean.")
    return value


def _require_number(value: Any, field_name: str, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"Expected '{field_name}' to be a number.")
    return float(value)


def _require_list_dict(value: Any, field_name: str) -> list[dict[str, Any]]:
    """Validate list of dict objects."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Expected '{field_name}' to be a list.")
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(f"Expected '{field_name}[{index}]' to be an object.")
    return value


def _parse_datetime(value: Any, field_name: str) -> datetime:
    if value is None:
        return utc_now()
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValueError(f"Expected '{field_name}' to be an ISO 8601 timestamp.") from exc
    raise ValueError(f"Expected '{field_name}' to be an ISO 8601 timestamp.")


@dataclass(frozen=True)
class Position:
    """Canvas coordinate of a diagram node."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "position") -> Position:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Expected '{field_name}' to be an object.")
        return cls(
            x=_require_number(data.get("x"), f"{field_name}.x"),
            y=_require_number(data.get("y"), f"{field_name}.y"),
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class UserStory:
    """A user story in role/action/benefit form with acceptance criteria."""

    story_id: str
    role: str
    action: str
    benefit: str
    acceptance_criteria: list[str]
    is_mvp: bool
    priority: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def statement(self) -> str:
        """Render the story in canonical sentence form."""
        return f"As a {self.role}, I want to {self.action}, so that {self.benefit}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserStory:
        """Create a story from API or model-produced JSON."""
        raw_id = data.get("id")
        return cls(
            story_id=new_id() if raw_id is None else _require_string(raw_id, "id"),
            role=_require_string(data.get("role"), "role"),
            action=_require_string(data.get("action"), "action"),
            benefit=_require_string(data.get("benefit"), "benefit"),
            acceptance_criteria=_require_string_list(
                data.get("acceptanceCriteria"), "acceptanceCriteria"
            ),
            is_mvp=_require_bool(data.get("isMvp"), "isMvp"),
            priority=_require_choice(data.get("priority") or "P2", "priority", PRIORITIES),
            created_at=_parse_datetime(data.get("createdAt"), "createdAt"),
            updated_at=_parse_datetime(data.get("updatedAt"), "updatedAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.story_id,
            "role": self.role,
            "action": self.action,
            "benefit": self.benefit,
            "acceptanceCriteria": list(self.acceptance_criteria),
            "isMvp": self.is_mvp,
            "priority": self.priority,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class FlowNode:
    """A node in the user-flow graph."""

    node_id: str
    type: str
    label: str
    position: Position = field(default_factory=Position)
    description: str | None = None
    linked_story_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowNode:
        return cls(
            node_id=_require_string(data.get("id"), "id"),
            type=_require_choice(data.get("type"), "type", FLOW_NODE_TYPES),
            label=_require_string(data.get("label"), "label"),
            position=Position.from_dict(data.get("position")),
            description=_optional_string(data.get("description"), "description"),
            linked_story_ids=_require_string_list(data.get("linkedStoryIds"), "linkedStoryIds"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.node_id,
            "type": self.type,
            "label": self.label,
            "position": self.position.to_dict(),
            "linkedStoryIds": list(self.linked_story_ids),
        }
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass(frozen=True)
class FlowEdge:
    """A directed transition between two flow nodes."""

    edge_id: str
    source: str
    target: str
    label: str | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowEdge:
        raw_type = data.get("type")
        return cls(
            edge_id=_require_string(data.get("id"), "id"),
            source=_require_string(data.get("source"), "source"),
            target=_require_string(data.get("target"), "target"),
            label=_optional_string(data.get("label"), "label"),
            type=None if raw_type is None else _require_choice(raw_type, "type", FLOW_EDGE_TYPES),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.edge_id, "source": self.source, "target": self.target}
        if self.label is not None:
            payload["label"] = self.label
        if self.type is not None:
            payload["type"] = self.type
        return payload


@dataclass(frozen=True)
class EntityAttribute:
    """A typed attribute of a data entity."""

    name: str
    type: str
    required: bool
    is_primary_key: bool = False
    is_foreign_key: bool = False
    reference_to: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityAttribute:
        return cls(
            name=_require_string(data.get("name"), "name"),
            type=_require_choice(data.get("type"), "type", ATTRIBUTE_TYPES),
            required=_require_bool(data.get("required"), "required"),
            is_primary_key=_require_bool(data.get("isPrimaryKey"), "isPrimaryKey"),
            is_foreign_key=_require_bool(data.get("isForeignKey"), "isForeignKey"),
            reference_to=_optional_string(data.get("referenceTo"), "referenceTo"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "type": self.type, "required": self.required}
        if self.is_primary_key:
            payload["isPrimaryKey"] = True
        if self.is_foreign_key:
            payload["isForeignKey"] = True
        if self.reference_to is not None:
            payload["referenceTo"] = self.reference_to
        return payload


@dataclass(frozen=True)
class DataEntity:
    """An entity in the data model."""

    entity_id: str
    name: str
    attributes: list[EntityAttribute]
    position: Position = field(default_factory=Position)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataEntity:
        return cls(
            entity_id=_require_string(data.get("id"), "id"),
            name=_require_string(data.get("name"), "name"),
            attributes=[
                EntityAttribute.from_dict(item)
                for item in _require_list_dict(data.get("attributes"), "attributes")
            ],
            position=Position.from_dict(data.get("position")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entity_id,
            "name": self.name,
            "attributes": [item.to_dict() for item in self.attributes],
            "position": self.position.to_dict(),
        }


@dataclass(frozen=True)
class EntityRelationship:
    """A cardinality relationship between two entities."""

    relationship_id: str
    source_entity: str
    target_entity: str
    type: str
    label: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityRelationship:
        return cls(
            relationship_id=_require_string(data.get("id"), "id"),
            source_entity=_require_string(data.get("sourceEntity"), "sourceEntity"),
            target_entity=_require_string(data.get("targetEntity"), "targetEntity"),
            type=_require_choice(data.get("type"), "type", RELATIONSHIP_TYPES),
            label=_optional_string(data.get("label"), "label"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.relationship_id,
            "sourceEntity": self.source_entity,
            "targetEntity": self.target_entity,
            "type": self.type,
        }
        if self.label is not None:
            payload["label"] = self.label
        return payload


@dataclass(frozen=True)
class WireframeComponent:
    """A semantic UI component placed on a screen."""

    component_id: str
    type: str
    label: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    props: dict[str, Any] = field(default_factory=dict, hash=False)
    linked_entity_id: str | None = None
    linked_story_ids: list[str] = field(default_factory=list, hash=False)

    def to_shape(self) -> Shape:
        """Bridge to the layout engine, carrying the id so it can be matched back."""
        return Shape(
            type=self.type,
            label=self.label,
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            extra={"id": self.component_id},
        )

    def with_geometry(self, shape: Shape) -> WireframeComponent:
        return WireframeComponent(
            component_id=self.component_id,
            type=self.type,
            label=self.label,
            x=shape.x,
            y=shape.y,
            width=shape.width,
            height=shape.height,
            props=dict(self.props),
            linked_entity_id=self.linked_entity_id,
            linked_story_ids=list(self.linked_story_ids),
        )

    @classmethod
    def from_shape(cls, shape: Shape) -> WireframeComponent:
        raw_id = shape.extra.get("id")
        return cls(
            component_id=str(raw_id) if raw_id else new_id(),
            type=shape.type,
            label=shape.label,
            x=shape.x,
            y=shape.y,
            width=shape.width,
            height=shape.height,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WireframeComponent:
        position = data.get("position") or {}
        size = data.get("size") or {}
        if not isinstance(position, dict) or not isinstance(size, dict):
            raise ValueError("Expected 'position' and 'size' to be objects.")
        props = data.get("props") or {}
        if not isinstance(props, dict):
            raise ValueError("Expected 'props' to be an object.")
        raw_id = data.get("id")
        return cls(
            component_id=new_id() if raw_id is None else _require_string(raw_id, "id"),
            type=_require_string(data.get("type"), "type"),
            label=_require_string(data.get("label"), "label"),
            x=_require_number(position.get("x"), "position.x"),
            y=_require_number(position.get("y"), "position.y"),
            width=_require_number(size.get("width"), "size.width"),
            height=_require_number(size.get("height"), "size.height"),
            props=dict(props),
            linked_entity_id=_optional_string(data.get("linkedEntityId"), "linkedEntityId"),
            linked_story_ids=_require_string_list(data.get("linkedStoryIds"), "linkedStoryIds"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.component_id,
            "type": self.type,
            "label": self.label,
            "position": {"x": self.x, "y": self.y},
            "size": {"width": self.width, "height": self.height},
            "linkedStoryIds": list(self.linked_story_ids),
        }
        if self.props:
            payload["props"] = dict(self.props)
        if self.linked_entity_id is not None:
            payload["linkedEntityId"] = self.linked_entity_id
        return payload


@dataclass(frozen=True)
class Screen:
    """A routed screen and its wireframe components."""

    screen_id: str
    name: str
    path: str
    components: list[WireframeComponent] = field(default_factory=list)
    linked_story_ids: list[str] = field(default_factory=list)
    description: str | None = None
    linked_flow_node_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Screen:
        name = _require_string(data.get("name"), "name")
        raw_id = data.get("id")
        raw_path = data.get("path")
        return cls(
            screen_id=new_id() if raw_id is None else _require_string(raw_id, "id"),
            name=name,
            path=screen_path(name) if raw_path is None else _require_string(raw_path, "path"),
            components=[
                WireframeComponent.from_dict(item)
                for item in _require_list_dict(data.get("components"), "components")
            ],
            linked_story_ids=_require_string_list(data.get("linkedStoryIds"), "linkedStoryIds"),
            description=_optional_string(data.get("description"), "description"),
            linked_flow_node_id=_optional_string(
                data.get("linkedFlowNodeId"), "linkedFlowNodeId"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.screen_id,
            "name": self.name,
            "path": self.path,
            "components": [item.to_dict() for item in self.components],
            "linkedStoryIds": list(self.linked_story_ids),
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.linked_flow_node_id is not None:
            payload["linkedFlowNodeId"] = self.linked_flow_node_id
        return payload


@dataclass(frozen=True)
class Blueprint:
    """Aggregate of every artifact derived from one requirements document."""

    blueprint_id: str
    name: str
    version: str = "1.0.0"
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    raw_prd: str = ""
    stories: list[UserStory] = field(default_factory=list)
    flow_nodes: list[FlowNode] = field(default_factory=list)
    flow_edges: list[FlowEdge] = field(default_factory=list)
    entities: list[DataEntity] = field(default_factory=list)
    relationships: list[EntityRelationship] = field(default_factory=list)
    screens: list[Screen] = field(default_factory=list)

    @classmethod
    def empty(cls, name: str = "Untitled Project") -> Blueprint:
        return cls(blueprint_id=new_id(), name=name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.blueprint_id,
            "name": self.name,
            "version": self.version,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "rawPrd": self.raw_prd,
            "stories": [item.to_dict() for item in self.stories],
            "userFlow": {
                "nodes": [item.to_dict() for item in self.flow_nodes],
                "edges": [item.to_dict() for item in self.flow_edges],
            },
            "dataModel": {
                "entities": [item.to_dict() for item in self.entities],
                "relationships": [item.to_dict() for item in self.relationships],
            },
            "screens": [item.to_dict() for item in self.screens],
        }
