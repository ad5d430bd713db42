"""OpenAI-backed model provider for story, flow, data-model and wireframe drafts."""

from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any

from openai import APIConnectionError, APITimeoutError, OpenAI, RateLimitError

from vibe_architect.blueprint.config_validation import require_positive_int

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"


class OpenAIProvider:
    """LLM provider implementation using the OpenAI Python SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.2,
        max_output_tokens: int = 4_000,
        max_retries: int = 4,
        min_retry_seconds: float = 1.0,
        max_retry_seconds: float = 20.0,
        client: Any | None = None,
    ) -> None:
        """Initialize provider with API key and model settings."""
        require_positive_int(max_retries, "max_retries")
        if client is None:
            resolved_api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not resolved_api_key:
                raise ValueError("OPENAI_API_KEY is required for OpenAIProvider.")
            client = OpenAI(api_key=resolved_api_key)
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.max_retries = max_retries
        self.min_retry_seconds = min_retry_seconds
        self.max_retry_seconds = max_retry_seconds

    def generate_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Generate structured JSON from the configured model."""
        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                return _parse_json_response(self._complete(system_prompt, user_prompt))
            except (RateLimitError, APIConnectionError, APITimeoutError) as exc:
                last_error = exc
                if attempt >= self.max_retries:
                    raise
                delay = self._retry_delay(attempt)
                logger.warning(
                    "OpenAI request failed (%s); retrying in %.2fs (attempt %s/%s).",
                    type(exc).__name__,
                    delay,
                    attempt,
                    self.max_retries,
                )
                time.sleep(delay)
        raise RuntimeError("OpenAI retries exhausted.") from last_error

    def _retry_delay(self, attempt: int) -> float:
        return min(self.min_retry_seconds * (2 ** (attempt - 1)), self.max_retry_seconds)

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Call the Chat Completions API in JSON mode and return message text."""
        response = self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            max_completion_tokens=self.max_output_tokens,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )
        message = response.choices[0].message.content
        if message is None:
            raise RuntimeError("Model returned empty message content.")
        return str(message)


def _parse_json_response(raw_text: str) -> dict[str, Any]:
    """Parse a JSON object from possibly noisy model output."""
    cleaned = raw_text.strip()
    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", cleaned)
        cleaned = re.sub(r"\s*```$", "", cleaned)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", cleaned, flags=re.DOTALL)
        if not match:
            raise ValueError("Model output did not contain JSON.") from None
        parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("Expected top-level JSON object from model.")
    return parsed
