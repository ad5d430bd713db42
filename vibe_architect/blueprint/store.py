"""In-memory state container for the blueprint editor.

Every mutation swaps in a new frozen ``Blueprint`` value and bumps its
``updated_at``; nothing here touches disk.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from vibe_architect.blueprint.layout import layout
from vibe_architect.blueprint.models import (
    Blueprint,
    DataEntity,
    EntityRelationship,
    FlowEdge,
    FlowNode,
    Phase,
    Screen,
    UserStory,
    WireframeComponent,
    new_id,
    screen_path,
    utc_now,
)

logger = logging.getLogger(__name__)


class BlueprintStore:
    """Holds the current blueprint, selection and AI status flags."""

    def __init__(self, blueprint: Blueprint | None = None) -> None:
        self.blueprint = blueprint or Blueprint.empty()
        self.current_phase = Phase.stories
        self.selected_story_id: str | None = None
        self.selected_node_id: str | None = None
        self.selected_entity_id: str | None = None
        self.selected_screen_id: str | None = None
        self.is_ai_processing = False
        self.ai_error: str | None = None

    def _commit(self, **changes: Any) -> Blueprint:
        self.blueprint = replace(self.blueprint, updated_at=utc_now(), **changes)
        return self.blueprint

    # Phase and blueprint

    def set_phase(self, phase: Phase | str) -> None:
        self.current_phase = Phase(phase)

    def create_new_blueprint(self, name: str) -> Blueprint:
        """Reset to an empty blueprint and clear all selections."""
        self.blueprint = Blueprint.empty(name)
        self.selected_story_id = None
        self.selected_node_id = None
        self.selected_entity_id = None
        self.selected_screen_id = None
        self.current_phase = Phase.stories
        return self.blueprint

    def update_blueprint_name(self, name: str) -> Blueprint:
        return self._commit(name=name)

    def set_raw_prd(self, prd: str) -> Blueprint:
        return self._commit(raw_prd=prd)

    # Stories

    def add_story(
        self,
        *,
        role: str,
        action: str,
        benefit: str,
        acceptance_criteria: list[str] | None = None,
        is_mvp: bool = False,
        priority: str = "P2",
    ) -> UserStory:
        story = UserStory(
            story_id=new_id(),
            role=role,
            action=action,
            benefit=benefit,
            acceptance_criteria=list(acceptance_criteria or []),
            is_mvp=is_mvp,
            priority=priority,
        )
        self._commit(stories=[*self.blueprint.stories, story])
        return story

    def update_story(self, story_id: str, **updates: Any) -> None:
        now = utc_now()
        self._commit(
            stories=[
                replace(story, **updates, updated_at=now) if story.story_id == story_id else story
                for story in self.blueprint.stories
            ]
        )

    def delete_story(self, story_id: str) -> None:
        self._commit(
            stories=[story for story in self.blueprint.stories if story.story_id != story_id]
        )
        if self.selected_story_id == story_id:
            self.selected_story_id = None

    def toggle_mvp(self, story_id: str) -> None:
        now = utc_now()
        self._commit(
            stories=[
                replace(story, is_mvp=not story.is_mvp, updated_at=now)
                if story.story_id == story_id
                else story
                for story in self.blueprint.stories
            ]
        )

    def set_stories(self, stories: list[UserStory]) -> None:
        self._commit(stories=list(stories))

    def select_story(self, story_id: str | None) -> None:
        self.selected_story_id = story_id

    def mvp_stories(self) -> list[UserStory]:
        """Stories flagged for MVP scope, in backlog order."""
        return [story for story in self.blueprint.stories if story.is_mvp]

    # User flow

    def add_flow_node(self, node: FlowNode) -> FlowNode:
        created = replace(node, node_id=new_id())
        self._commit(flow_nodes=[*self.blueprint.flow_nodes, created])
        return created

    def update_flow_node(self, node_id: str, **updates: Any) -> None:
        self._commit(
            flow_nodes=[
                replace(node, **updates) if node.node_id == node_id else node
                for node in self.blueprint.flow_nodes
            ]
        )

    def delete_flow_node(self, node_id: str) -> None:
        """Remove a node together with every edge that touches it."""
        self._commit(
            flow_nodes=[node for node in self.blueprint.flow_nodes if node.node_id != node_id],
            flow_edges=[
                edge
                for edge in self.blueprint.flow_edges
                if edge.source != node_id and edge.target != node_id
            ],
        )
        if self.selected_node_id == node_id:
            self.selected_node_id = None

    def add_flow_edge(self, edge: FlowEdge) -> FlowEdge:
        created = replace(edge, edge_id=new_id())
        self._commit(flow_edges=[*self.blueprint.flow_edges, created])
        return created

    def update_flow_edge(self, edge_id: str, **updates: Any) -> None:
        self._commit(
            flow_edges=[
                replace(edge, **updates) if edge.edge_id == edge_id else edge
                for edge in self.blueprint.flow_edges
            ]
        )

    def delete_flow_edge(self, edge_id: str) -> None:
        self._commit(
            flow_edges=[edge for edge in self.blueprint.flow_edges if edge.edge_id != edge_id]
        )

    def set_flow(self, nodes: list[FlowNode], edges: list[FlowEdge]) -> None:
        self._commit(flow_nodes=list(nodes), flow_edges=list(edges))

    def select_node(self, node_id: str | None) -> None:
        self.selected_node_id = node_id

    # Data model

    def add_entity(self, entity: DataEntity) -> DataEntity:
        created = replace(entity, entity_id=new_id())
        self._commit(entities=[*self.blueprint.entities, created])
        return created

    def update_entity(self, entity_id: str, **updates: Any) -> None:
        self._commit(
            entities=[
                replace(entity, **updates) if entity.entity_id == entity_id else entity
                for entity in self.blueprint.entities
            ]
        )

    def delete_entity(self, entity_id: str) -> None:
        """Remove an entity together with every relationship that references it."""
        self._commit(
            entities=[
                entity for entity in self.blueprint.entities if entity.entity_id != entity_id
            ],
            relationships=[
                rel
                for rel in self.blueprint.relationships
                if rel.source_entity != entity_id and rel.target_entity != entity_id
            ],
        )
        if self.selected_entity_id == entity_id:
            self.selected_entity_id = None

    def add_relationship(self, relationship: EntityRelationship) -> EntityRelationship:
        created = replace(relationship, relationship_id=new_id())
        self._commit(relationships=[*self.blueprint.relationships, created])
        return created

    def update_relationship(self, relationship_id: str, **updates: Any) -> None:
        self._commit(
            relationships=[
                replace(rel, **updates) if rel.relationship_id == relationship_id else rel
                for rel in self.blueprint.relationships
            ]
        )

    def delete_relationship(self, relationship_id: str) -> None:
        self._commit(
            relationships=[
                rel
                for rel in self.blueprint.relationships
                if rel.relationship_id != relationship_id
            ]
        )

    def set_data_model(
        self, entities: list[DataEntity], relationships: list[EntityRelationship]
    ) -> None:
        self._commit(entities=list(entities), relationships=list(relationships))

    def select_entity(self, entity_id: str | None) -> None:
        self.selected_entity_id = entity_id

    # Screens

    def add_screen(
        self,
        *,
        name: str,
        path: str | None = None,
        linked_story_ids: list[str] | None = None,
        linked_flow_node_id: str | None = None,
    ) -> Screen:
        screen = Screen(
            screen_id=new_id(),
            name=name,
            path=path or screen_path(name),
            linked_story_ids=list(linked_story_ids or []),
            linked_flow_node_id=linked_flow_node_id,
        )
        self._commit(screens=[*self.blueprint.screens, screen])
        return screen

    def update_screen(self, screen_id: str, **updates: Any) -> None:
        self._commit(
            screens=[
                replace(screen, **updates) if screen.screen_id == screen_id else screen
                for screen in self.blueprint.screens
            ]
        )

    def delete_screen(self, screen_id: str) -> None:
        self._commit(
            screens=[screen for screen in self.blueprint.screens if screen.screen_id != screen_id]
        )
        if self.selected_screen_id == screen_id:
            self.selected_screen_id = None

    def set_screens(self, screens: list[Screen]) -> None:
        self._commit(screens=list(screens))

    def select_screen(self, screen_id: str | None) -> None:
        self.selected_screen_id = screen_id

    def get_screen(self, screen_id: str) -> Screen:
        for screen in self.blueprint.screens:
            if screen.screen_id == screen_id:
                return screen
        raise KeyError(screen_id)

    def add_component(self, screen_id: str, component: WireframeComponent) -> WireframeComponent:
        created = replace(component, component_id=new_id())
        self._commit(
            screens=[
                replace(screen, components=[*screen.components, created])
                if screen.screen_id == screen_id
                else screen
                for screen in self.blueprint.screens
            ]
        )
        return created

    def update_component(self, screen_id: str, component_id: str, **updates: Any) -> None:
        screens: list[Screen] = []
        for screen in self.blueprint.screens:
            if screen.screen_id == screen_id:
                screen = replace(
                    screen,
                    components=[
                        replace(item, **updates) if item.component_id == component_id else item
                        for item in screen.components
                    ],
                )
            screens.append(screen)
        self._commit(screens=screens)

    def delete_component(self, screen_id: str, component_id: str) -> None:
        self._commit(
            screens=[
                replace(
                    screen,
                    components=[
                        item for item in screen.components if item.component_id != component_id
                    ],
                )
                if screen.screen_id == screen_id
                else screen
                for screen in self.blueprint.screens
            ]
        )

    def set_components(self, screen_id: str, components: list[WireframeComponent]) -> None:
        self.update_screen(screen_id, components=list(components))

    def sync_screens_from_flow(self) -> list[Screen]:
        """Create a screen for every flow 'screen' node that has none yet."""
        linked = {
            screen.linked_flow_node_id
            for screen in self.blueprint.screens
            if screen.linked_flow_node_id is not None
        }
        created: list[Screen] = []
        for node in self.blueprint.flow_nodes:
            if node.type != "screen" or node.node_id in linked:
                continue
            created.append(
                Screen(
                    screen_id=new_id(),
                    name=node.label,
                    path=screen_path(node.label),
                    linked_story_ids=list(node.linked_story_ids),
                    description=node.description,
                    linked_flow_node_id=node.node_id,
                )
            )
        if created:
            self._commit(screens=[*self.blueprint.screens, *created])
            logger.info("Created %s screens from user flow.", len(created))
        return created

    def apply_layout(self, screen_id: str) -> Screen:
        """Recompute geometry for every component on a screen.

        Structural components move to the front, matching the engine's output
        order.
        """
        screen = self.get_screen(screen_id)
        # Matched back by input position; component ids are not guaranteed unique.
        positioned = layout(
            replace(item.to_shape(), extra={"index": index})
            for index, item in enumerate(screen.components)
        )
        components = [
            screen.components[shape.extra["index"]].with_geometry(shape) for shape in positioned
        ]
        self.set_components(screen_id, components)
        return self.get_screen(screen_id)

    # AI status

    def set_ai_processing(self, is_processing: bool) -> None:
        self.is_ai_processing = is_processing

    def set_ai_error(self, error: str | None) -> None:
        self.ai_error = error
