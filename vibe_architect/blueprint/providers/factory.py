"""Provider selection from CLI options or environment."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from vibe_architect.blueprint.config_validation import validate_provider_mode
from vibe_architect.blueprint.providers.base import LLMProvider
from vibe_architect.blueprint.providers.mock_provider import MockProvider
from vibe_architect.blueprint.providers.openai_provider import DEFAULT_MODEL, OpenAIProvider

logger = logging.getLogger(__name__)


def load_mock_responses(path: Path) -> list[dict[str, Any]]:
    """Load and validate queued mock provider responses."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Mock responses file must contain a JSON list.")
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Mock response index {index} is not an object.")
    return raw


def create_provider(
    mode: str | None = None,
    *,
    model: str | None = None,
    mock_responses_file: Path | None = None,
) -> LLMProvider | None:
    """Create a model provider, or None when offline drafts should be used.

    ``auto`` picks OpenAI when ``OPENAI_API_KEY`` is set and falls back to the
    offline drafts otherwise.
    """
    resolved_mode = validate_provider_mode(mode or os.getenv("VIBE_PROVIDER", "auto"))
    resolved_model = model or os.getenv("VIBE_MODEL", DEFAULT_MODEL)
    if resolved_mode == "auto":
        resolved_mode = "openai" if os.getenv("OPENAI_API_KEY") else "offline"
        logger.info("Provider mode auto resolved to %s.", resolved_mode)
    if resolved_mode == "openai":
        return OpenAIProvider(model=resolved_model)
    if resolved_mode == "mock":
        if mock_responses_file is None:
            raise ValueError("A mock responses file is required when provider=mock.")
        return MockProvider(load_mock_responses(mock_responses_file))
    return None
