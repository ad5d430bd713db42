"""User-flow graph generation from user stories."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from vibe_architect.blueprint.models import FlowEdge, FlowNode, Position, UserStory
from vibe_architect.blueprint.prompts import FLOW_SYSTEM_PROMPT, build_flow_user_prompt
from vibe_architect.blueprint.providers.base import LLMProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserFlow:
    """Nodes and edges of a generated user flow."""

    nodes: list[FlowNode]
    edges: list[FlowEdge]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


def _node(
    index: int, node_type: str, label: str, x: float, y: float, story_ids: list[str]
) -> FlowNode:
    return FlowNode(
        node_id=f"node-{index}",
        type=node_type,
        label=label,
        position=Position(x, y),
        linked_story_ids=story_ids,
    )


def draft_flow(stories: Sequence[UserStory]) -> UserFlow:
    """Login -> dashboard flow used when no model provider is configured."""
    ids = [story.story_id for story in stories]
    nodes = [
        _node(0, "start", "Start", 400, 50, []),
        _node(1, "screen", "Login Page", 400, 150, ids[:1]),
        _node(2, "action", "Authenticate", 400, 250, []),
        _node(3, "decision", "Authorized?", 400, 350, []),
        _node(4, "screen", "Dashboard", 250, 500, ids[1:3]),
        _node(5, "screen", "Error Page", 550, 500, []),
        _node(6, "screen", "Settings", 100, 650, ids[3:]),
        _node(7, "screen", "Main Feature", 400, 650, list(ids)),
        _node(8, "end", "End", 400, 800, []),
    ]
    links = [
        (0, 1, None, "navigation"),
        (1, 2, "Submit", "action"),
        (2, 3, None, "navigation"),
        (3, 4, "Yes", "conditional"),
        (3, 5, "No", "conditional"),
        (4, 6, "Settings", "navigation"),
        (4, 7, "Continue", "navigation"),
        (7, 8, None, "navigation"),
    ]
    edges = [
        FlowEdge(
            edge_id=f"edge-{index}",
            source=f"node-{source}",
            target=f"node-{target}",
            label=label,
            type=edge_type,
        )
        for index, (source, target, label, edge_type) in enumerate(links)
    ]
    return UserFlow(nodes=nodes, edges=edges)


def resolve_index(value: Any, size: int, field_name: str) -> int:
    """Parse an index reference the model emitted as a string or integer."""
    try:
        index = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Expected '{field_name}' to be an index, got {value!r}.") from exc
    if not 0 <= index < size:
        raise ValueError(f"'{field_name}' index {index} is out of range.")
    return index


def _story_reference(ref: Any, story_ids: Sequence[str]) -> str:
    """Map an index reference to a story id; other references pass through."""
    text = str(ref).strip()
    if text.isdigit() and int(text) < len(story_ids):
        return story_ids[int(text)]
    return text


class FlowGenerator:
    """Builds a user-flow graph for a set of stories."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        self.provider = provider

    def generate(self, stories: Sequence[UserStory]) -> UserFlow:
        if self.provider is None:
            return draft_flow(stories)
        response = self.provider.generate_json(
            system_prompt=FLOW_SYSTEM_PROMPT,
            user_prompt=build_flow_user_prompt(stories),
        )
        flow = self._parse(response, stories)
        logger.info(
            "Generated flow with %s nodes and %s edges.", len(flow.nodes), len(flow.edges)
        )
        return flow

    def _parse(self, response: dict[str, Any], stories: Sequence[UserStory]) -> UserFlow:
        raw_nodes = response.get("nodes")
        raw_edges = response.get("edges", [])
        if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
            raise ValueError("Model output must include 'nodes' and 'edges' lists.")
        story_ids = [story.story_id for story in stories]

        nodes: list[FlowNode] = []
        for index, item in enumerate(raw_nodes):
            if not isinstance(item, dict):
                raise ValueError(f"Expected 'nodes[{index}]' to be an object.")
            linked = [
                _story_reference(ref, story_ids) for ref in item.get("linkedStoryIds") or []
            ]
            payload = {**item, "id": f"node-{index}", "linkedStoryIds": linked}
            nodes.append(FlowNode.from_dict(payload))

        edges: list[FlowEdge] = []
        for index, item in enumerate(raw_edges):
            if not isinstance(item, dict):
                raise ValueError(f"Expected 'edges[{index}]' to be an object.")
            source = resolve_index(item.get("source"), len(nodes), "source")
            target = resolve_index(item.get("target"), len(nodes), "target")
            edges.append(
                FlowEdge.from_dict(
                    {
                        **item,
                        "id": f"edge-{index}",
                        "source": f"node-{source}",
                        "target": f"node-{target}",
                    }
                )
            )
        return UserFlow(nodes=nodes, edges=edges)
