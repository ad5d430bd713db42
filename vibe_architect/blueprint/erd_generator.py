"""Data model (entity-relationship) generation from user stories."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from vibe_architect.blueprint.flow_generator import resolve_index
from vibe_architect.blueprint.models import (
    DataEntity,
    EntityAttribute,
    EntityRelationship,
    Position,
    UserStory,
)
from vibe_architect.blueprint.prompts import ERD_SYSTEM_PROMPT, build_erd_user_prompt
from vibe_architect.blueprint.providers.base import LLMProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataModel:
    """Entities and relationships of a generated data model."""

    entities: list[DataEntity]
    relationships: list[EntityRelationship]

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [entity.to_dict() for entity in self.entities],
            "relationships": [rel.to_dict() for rel in self.relationships],
        }


def _pk() -> EntityAttribute:
    return EntityAttribute("id", "string", required=True, is_primary_key=True)


def _fk(name: str, target: str, *, required: bool = True) -> EntityAttribute:
    return EntityAttribute(
        name, "reference", required=required, is_foreign_key=True, reference_to=target
    )


def _attr(name: str, attr_type: str = "string", *, required: bool = True) -> EntityAttribute:
    return EntityAttribute(name, attr_type, required=required)


def draft_data_model() -> DataModel:
    """User/Project/Task/Comment model used when no model provider is configured."""
    entities = [
        DataEntity(
            "entity-0",
            "User",
            [
                _pk(),
                _attr("email"),
                _attr("name"),
                _attr("passwordHash"),
                _attr("role"),
                _attr("createdAt", "date"),
                _attr("updatedAt", "date"),
            ],
            Position(100, 100),
        ),
        DataEntity(
            "entity-1",
            "Project",
            [
                _pk(),
                _attr("name"),
                _attr("description", required=False),
                _fk("ownerId", "User"),
                _attr("status"),
                _attr("createdAt", "date"),
                _attr("updatedAt", "date"),
            ],
            Position(400, 100),
        ),
        DataEntity(
            "entity-2",
            "Task",
            [
                _pk(),
                _attr("title"),
                _attr("description", required=False),
                _fk("projectId", "Project"),
                _fk("assigneeId", "User", required=False),
                _attr("priority"),
                _attr("status"),
                _attr("dueDate", "date", required=False),
                _attr("createdAt", "date"),
            ],
            Position(700, 100),
        ),
        DataEntity(
            "entity-3",
            "Comment",
            [
                _pk(),
                _attr("content"),
                _fk("taskId", "Task"),
                _fk("authorId", "User"),
                _attr("createdAt", "date"),
            ],
            Position(250, 350),
        ),
    ]
    links = [
        (0, 1, "owns"),
        (1, 2, "contains"),
        (0, 2, "assigned to"),
        (2, 3, "has"),
        (0, 3, "authored by"),
    ]
    relationships = [
        EntityRelationship(
            relationship_id=f"rel-{index}",
            source_entity=f"entity-{source}",
            target_entity=f"entity-{target}",
            type="one-to-many",
            label=label,
        )
        for index, (source, target, label) in enumerate(links)
    ]
    return DataModel(entities=entities, relationships=relationships)


class ErdGenerator:
    """Builds a data model for a set of stories."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        self.provider = provider

    def generate(self, stories: Sequence[UserStory]) -> DataModel:
        if self.provider is None:
            return draft_data_model()
        response = self.provider.generate_json(
            system_prompt=ERD_SYSTEM_PROMPT,
            user_prompt=build_erd_user_prompt(stories),
        )
        model = self._parse(response)
        logger.info(
            "Generated data model with %s entities and %s relationships.",
            len(model.entities),
            len(model.relationships),
        )
        return model

    def _parse(self, response: dict[str, Any]) -> DataModel:
        raw_entities = response.get("entities")
        raw_relationships = response.get("relationships", [])
        if not isinstance(raw_entities, list) or not isinstance(raw_relationships, list):
            raise ValueError("Model output must include 'entities' and 'relationships' lists.")

        entities: list[DataEntity] = []
        for index, item in enumerate(raw_entities):
            if not isinstance(item, dict):
                raise ValueError(f"Expected 'entities[{index}]' to be an object.")
            entities.append(DataEntity.from_dict({**item, "id": f"entity-{index}"}))

        relationships: list[EntityRelationship] = []
        for index, item in enumerate(raw_relationships):
            if not isinstance(item, dict):
                raise ValueError(f"Expected 'relationships[{index}]' to be an object.")
            source = resolve_index(item.get("sourceEntity"), len(entities), "sourceEntity")
            target = resolve_index(item.get("targetEntity"), len(entities), "targetEntity")
            relationships.append(
                EntityRelationship.from_dict(
                    {
                        **item,
                        "id": f"rel-{index}",
                        "sourceEntity": f"entity-{source}",
                        "targetEntity": f"entity-{target}",
                    }
                )
            )
        return DataModel(entities=entities, relationships=relationships)
