"""Prompt templates used by the blueprint generators."""

from __future__ import annotations

from collections.abc import Sequence

from vibe_architect.blueprint.layout import ShapeKind
from vibe_architect.blueprint.models import DataEntity, UserStory

STORY_SYSTEM_PROMPT = """
You are a product analyst.
Return STRICT JSON only.
Extract user stories from the product requirements document.
Your output schema:
{
  "stories": [
    {
      "role": "who the user is",
      "action": "what they want to do",
      "benefit": "why they want to do it",
      "acceptanceCriteria": ["2-4 specific, testable criteria"],
      "priority": "P0|P1|P2|P3",
      "isMvp": true
    }
  ]
}
Rules:
- One story per distinct feature or requirement, no duplicates.
- Be selective with isMvp; roughly a third to a half of stories.
""".strip()

FLOW_SYSTEM_PROMPT = """
You are a UX architect.
Return STRICT JSON only.
Create a user flow diagram from the MVP user stories.
Your output schema:
{
  "nodes": [
    {
      "type": "start|screen|action|decision|end",
      "label": "Dashboard",
      "description": "optional text or null",
      "linkedStoryIds": ["0"],
      "position": {"x": 400, "y": 50}
    }
  ],
  "edges": [
    {
      "source": "0",
      "target": "1",
      "label": "optional text or null",
      "type": "navigation|conditional|action"
    }
  ]
}
Rules:
- Exactly one start node and at least one end node.
- Edge source/target and linkedStoryIds are zero-based indices given as strings.
- Place nodes top to bottom, about 150 units per row and 200 units apart.
""".strip()

ERD_SYSTEM_PROMPT = """
You are a database architect.
Return STRICT JSON only.
Design a data model from the MVP user stories.
Your output schema:
{
  "entities": [
    {
      "name": "PascalCase name",
      "attributes": [
        {
          "name": "camelCase name",
          "type": "string|number|boolean|date|reference|array",
          "required": true,
          "isPrimaryKey": false,
          "isForeignKey": false,
          "referenceTo": "EntityName or null"
        }
      ],
      "position": {"x": 100, "y": 100}
    }
  ],
  "relationships": [
    {
      "sourceEntity": "0",
      "targetEntity": "1",
      "type": "one-to-one|one-to-many|many-to-many",
      "label": "optional verb"
    }
  ]
}
Rules:
- Every entity has an 'id' string attribute with isPrimaryKey true.
- sourceEntity/targetEntity are zero-based entity indices given as strings.
- Grid positions start at (100, 100), 300 units apart, at most 3 per row.
""".strip()

WIREFRAME_SYSTEM_PROMPT_TEMPLATE = """
You are a UI designer.
Return STRICT JSON only.
List the components of one application screen, top to bottom.
Your output schema:
{{
  "components": [
    {{"type": "one of: {kinds}", "label": "short visible label"}}
  ]
}}
Rules:
- Do not return coordinates or sizes; layout is computed separately.
- Group components of the same type consecutively.
- Use at most one navbar and one sidebar.
""".strip()


def render_story_lines(stories: Sequence[UserStory]) -> str:
    """Numbered story statements, zero-based so the model can cite indices."""
    return "\n".join(f"{index}. {story.statement}" for index, story in enumerate(stories))


def build_story_user_prompt(prd: str) -> str:
    return f"PRD Document:\n{prd}\n\nExtract all user stories."


def build_flow_user_prompt(stories: Sequence[UserStory]) -> str:
    return f"User Stories:\n{render_story_lines(stories)}"


def build_erd_user_prompt(stories: Sequence[UserStory]) -> str:
    return f"User Stories:\n{render_story_lines(stories)}"


def build_wireframe_system_prompt() -> str:
    kinds = ", ".join(kind.value for kind in ShapeKind)
    return WIREFRAME_SYSTEM_PROMPT_TEMPLATE.format(kinds=kinds)


def build_wireframe_user_prompt(
    screen_name: str,
    entities: Sequence[DataEntity],
    stories: Sequence[UserStory],
) -> str:
    entity_names = ", ".join(entity.name for entity in entities) or "none"
    return (
        f"Screen: {screen_name}\n"
        f"Data entities: {entity_names}\n"
        f"User Stories:\n{render_story_lines(stories) or 'none'}"
    )
