"""User story extraction from a product requirements document."""

from __future__ import annotations

import logging
from typing import Any

from vibe_architect.blueprint.models import UserStory, new_id, utc_now
from vibe_architect.blueprint.prompts import STORY_SYSTEM_PROMPT, build_story_user_prompt
from vibe_architect.blueprint.providers.base import LLMProvider

logger = logging.getLogger(__name__)

DRAFT_ROLES = ("user", "admin", "developer", "manager")


def draft_stories(prd: str) -> list[UserStory]:
    """Deterministic placeholder stories sized from the PRD length.

    Used when no model provider is configured.
    """
    lines = [line for line in prd.split("\n") if line.strip()]
    count = min(max(3, len(lines) // 20), 8)
    stories: list[UserStory] = []
    for index in range(count):
        number = index + 1
        if index < 2:
            priority = "P0"
        elif index < 4:
            priority = "P1"
        else:
            priority = "P2"
        stories.append(
            UserStory(
                story_id=new_id(),
                role=DRAFT_ROLES[index % len(DRAFT_ROLES)],
                action=f"complete feature {number} from the PRD",
                benefit="I can achieve the project goals",
                acceptance_criteria=[
                    f"Feature {number} is fully functional",
                    "All edge cases are handled",
                    "Performance meets requirements",
                ],
                is_mvp=index < 3,
                priority=priority,
            )
        )
    return stories


class StoryExtractor:
    """Turns raw PRD text into validated user stories."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        self.provider = provider

    def extract(self, prd: str) -> list[UserStory]:
        """Extract stories, falling back to offline drafts without a provider."""
        if not prd.strip():
            raise ValueError("prd must be non-empty for story extraction.")
        if self.provider is None:
            stories = draft_stories(prd)
            logger.info("Drafted %s offline stories.", len(stories))
            return stories
        response = self.provider.generate_json(
            system_prompt=STORY_SYSTEM_PROMPT,
            user_prompt=build_story_user_prompt(prd),
        )
        stories = self._parse(response)
        logger.info("Extracted %s stories from model output.", len(stories))
        return stories

    def _parse(self, response: dict[str, Any]) -> list[UserStory]:
        raw = response.get("stories")
        if not isinstance(raw, list):
            raise ValueError("Model output must include a 'stories' list.")
        stories: list[UserStory] = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                raise ValueError(f"Expected 'stories[{index}]' to be an object.")
            now = utc_now()
            # Model-supplied ids and timestamps are never trusted.
            payload = {**item, "id": new_id(), "createdAt": now, "updatedAt": now}
            stories.append(UserStory.from_dict(payload))
        return stories
