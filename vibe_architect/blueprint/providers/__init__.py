"""Model provider implementations."""

from vibe_architect.blueprint.providers.base import LLMProvider
from vibe_architect.blueprint.providers.factory import create_provider
from vibe_architect.blueprint.providers.mock_provider import MockProvider
from vibe_architect.blueprint.providers.openai_provider import OpenAIProvider

__all__ = ["LLMProvider", "MockProvider", "OpenAIProvider", "create_provider"]
