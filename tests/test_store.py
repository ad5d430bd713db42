"""Tests for the in-memory blueprint store."""

from __future__ import annotations

import pytest

from vibe_architect.blueprint.models import (
    DataEntity,
    EntityRelationship,
    FlowEdge,
    FlowNode,
    Phase,
    WireframeComponent,
)
from vibe_architect.blueprint.store import BlueprintStore


def _node(node_type: str, label: str) -> FlowNode:
    return FlowNode(node_id="draft", type=node_type, label=label)


def test_create_new_blueprint_resets_selection_and_phase() -> None:
    store = BlueprintStore()
    story = store.add_story(role="user", action="log in", benefit="I see my data")
    store.select_story(story.story_id)
    store.set_phase("design")

    blueprint = store.create_new_blueprint("Fresh")

    assert blueprint.name == "Fresh"
    assert blueprint.stories == []
    assert store.selected_story_id is None
    assert store.current_phase is Phase.stories


def test_mutations_bump_updated_at() -> None:
    store = BlueprintStore()
    before = store.blueprint.updated_at
    store.update_blueprint_name("Renamed")

    assert store.blueprint.name == "Renamed"
    assert store.blueprint.updated_at >= before


def test_story_crud_and_mvp_toggle() -> None:
    store = BlueprintStore()
    first = store.add_story(role="user", action="browse", benefit="I find things", is_mvp=True)
    second = store.add_story(role="admin", action="ban users", benefit="the forum stays civil")

    store.toggle_mvp(second.story_id)
    store.update_story(first.story_id, priority="P0")

    assert [story.story_id for story in store.mvp_stories()] == [
        first.story_id,
        second.story_id,
    ]
    assert store.blueprint.stories[0].priority == "P0"

    store.select_story(first.story_id)
    store.delete_story(first.story_id)
    assert [story.story_id for story in store.blueprint.stories] == [second.story_id]
    assert store.selected_story_id is None


def test_set_phase_rejects_unknown_phase() -> None:
    with pytest.raises(ValueError):
        BlueprintStore().set_phase("deploy")


def test_delete_flow_node_cascades_to_edges() -> None:
    store = BlueprintStore()
    start = store.add_flow_node(_node("start", "Start"))
    home = store.add_flow_node(_node("screen", "Home"))
    end = store.add_flow_node(_node("end", "End"))
    store.add_flow_edge(FlowEdge(edge_id="x", source=start.node_id, target=home.node_id))
    kept = store.add_flow_edge(FlowEdge(edge_id="y", source=start.node_id, target=end.node_id))
    store.add_flow_edge(FlowEdge(edge_id="z", source=home.node_id, target=end.node_id))
    store.select_node(home.node_id)

    store.delete_flow_node(home.node_id)

    assert [node.node_id for node in store.blueprint.flow_nodes] == [start.node_id, end.node_id]
    assert store.blueprint.flow_edges == [kept]
    assert store.selected_node_id is None


def test_added_flow_elements_receive_fresh_ids() -> None:
    store = BlueprintStore()
    first = store.add_flow_node(_node("screen", "A"))
    second = store.add_flow_node(_node("screen", "B"))

    assert first.node_id != "draft"
    assert first.node_id != second.node_id


def test_delete_entity_cascades_to_relationships() -> None:
    store = BlueprintStore()
    user = store.add_entity(DataEntity(entity_id="", name="User", attributes=[]))
    order = store.add_entity(DataEntity(entity_id="", name="Order", attributes=[]))
    item = store.add_entity(DataEntity(entity_id="", name="Item", attributes=[]))
    store.add_relationship(
        EntityRelationship("", user.entity_id, order.entity_id, "one-to-many", "places")
    )
    kept = store.add_relationship(
        EntityRelationship("", item.entity_id, item.entity_id, "one-to-one")
    )

    store.delete_entity(user.entity_id)

    assert [entity.name for entity in store.blueprint.entities] == ["Order", "Item"]
    assert store.blueprint.relationships == [kept]


def test_update_relationship_and_entity() -> None:
    store = BlueprintStore()
    entity = store.add_entity(DataEntity(entity_id="", name="Usr", attributes=[]))
    rel = store.add_relationship(
        EntityRelationship("", entity.entity_id, entity.entity_id, "one-to-one")
    )

    store.update_entity(entity.entity_id, name="User")
    store.update_relationship(rel.relationship_id, label="mentors")

    assert store.blueprint.entities[0].name == "User"
    assert store.blueprint.relationships[0].label == "mentors"


def test_sync_screens_from_flow_is_idempotent() -> None:
    store = BlueprintStore()
    store.add_flow_node(_node("start", "Start"))
    login = store.add_flow_node(_node("screen", "Login Page"))
    store.add_flow_node(_node("screen", "Order History"))

    created = store.sync_screens_from_flow()
    again = store.sync_screens_from_flow()

    assert [screen.path for screen in created] == ["/login-page", "/order-history"]
    assert created[0].linked_flow_node_id == login.node_id
    assert again == []
    assert len(store.blueprint.screens) == 2


def test_component_crud_on_screen() -> None:
    store = BlueprintStore()
    screen = store.add_screen(name="Settings")
    component = store.add_component(
        screen.screen_id, WireframeComponent(component_id="", type="form", label="Prefs")
    )

    store.update_component(screen.screen_id, component.component_id, label="Preferences")
    assert store.get_screen(screen.screen_id).components[0].label == "Preferences"

    store.delete_component(screen.screen_id, component.component_id)
    assert store.get_screen(screen.screen_id).components == []


def test_get_screen_raises_for_unknown_id() -> None:
    with pytest.raises(KeyError):
        BlueprintStore().get_screen("missing")


def test_apply_layout_positions_components_structural_first() -> None:
    store = BlueprintStore()
    screen = store.add_screen(name="Dashboard")
    for component_type, label in [("card", "Revenue"), ("navbar", "Top"), ("button", "Export")]:
        store.add_component(
            screen.screen_id,
            WireframeComponent(
                component_id="",
                type=component_type,
                label=label,
                props={"source": label},
            ),
        )

    laid_out = store.apply_layout(screen.screen_id)

    assert [item.type for item in laid_out.components] == ["navbar", "card", "button"]
    navbar, card, button = laid_out.components
    assert (navbar.x, navbar.y, navbar.width, navbar.height) == (0.0, 0.0, 1024.0, 56.0)
    assert (card.x, card.y, card.width) == (16.0, 72.0, 992.0)
    assert button.x + button.width == 1008.0
    assert card.props == {"source": "Revenue"}


def test_apply_layout_keeps_components_with_duplicate_ids_distinct() -> None:
    store = BlueprintStore()
    screen = store.add_screen(name="Gallery")
    store.set_components(
        screen.screen_id,
        [
            WireframeComponent.from_dict(
                {"id": "dup", "type": "card", "label": "A", "props": {"tone": "warm"}}
            ),
            WireframeComponent.from_dict({"id": "dup", "type": "card", "label": "B"}),
        ],
    )

    first, second = store.apply_layout(screen.screen_id).components

    assert [first.label, second.label] == ["A", "B"]
    assert first.props == {"tone": "warm"}
    assert second.props == {}
    assert first.x < second.x
    assert first.y == second.y == 16.0


def test_delete_screen_clears_selection() -> None:
    store = BlueprintStore()
    screen = store.add_screen(name="Help", path="/support")
    store.select_screen(screen.screen_id)

    store.delete_screen(screen.screen_id)

    assert store.blueprint.screens == []
    assert store.selected_screen_id is None


def test_ai_status_flags() -> None:
    store = BlueprintStore()
    store.set_ai_processing(True)
    store.set_ai_error("quota exceeded")

    assert store.is_ai_processing is True
    assert store.ai_error == "quota exceeded"
