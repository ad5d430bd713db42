"""Tests for model providers and provider selection."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from vibe_architect.blueprint.config_validation import (
    require_positive_int,
    validate_provider_mode,
)
from vibe_architect.blueprint.providers.factory import create_provider, load_mock_responses
from vibe_architect.blueprint.providers.mock_provider import MockProvider
from vibe_architect.blueprint.providers.openai_provider import (
    OpenAIProvider,
    _parse_json_response,
)


class FakeCompletions:
    """Records chat completion calls and returns canned message content."""

    def __init__(self, content: str | None) -> None:
        self.content = content
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content)))


def test_parse_json_response_strips_code_fences() -> None:
    assert _parse_json_response('```json\n{"ok": true}\n```') == {"ok": True}


def test_parse_json_response_extracts_embedded_object() -> None:
    assert _parse_json_response('Sure! {"stories": []} Hope that helps.') == {"stories": []}


def test_parse_json_response_rejects_non_object() -> None:
    with pytest.raises(ValueError, match="top-level JSON object"):
        _parse_json_response("[1, 2, 3]")
    with pytest.raises(ValueError, match="did not contain JSON"):
        _parse_json_response("no json here")


def test_openai_provider_uses_json_mode_with_fake_client() -> None:
    client = _fake_client('{"components": []}')
    provider = OpenAIProvider(model="gpt-test", client=client)

    assert provider.generate_json("system", "user") == {"components": []}
    call = client.chat.completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["response_format"] == {"type": "json_object"}
    assert call["messages"][0] == {"role": "system", "content": "system"}


def test_openai_provider_rejects_empty_content() -> None:
    provider = OpenAIProvider(client=_fake_client(None))
    with pytest.raises(RuntimeError, match="empty message"):
        provider.generate_json("system", "user")


def test_openai_provider_requires_api_key_without_client() -> None:
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        OpenAIProvider()


def test_openai_provider_retry_delay_is_capped() -> None:
    provider = OpenAIProvider(client=_fake_client("{}"), min_retry_seconds=1, max_retry_seconds=5)
    assert [provider._retry_delay(attempt) for attempt in (1, 2, 3, 4)] == [1, 2, 4, 5]


def test_mock_provider_returns_copies_in_order() -> None:
    provider = MockProvider([{"n": [1]}, {"n": [2]}])
    first = provider.generate_json("s", "u1")
    first["n"].append(99)

    assert provider.generate_json("s", "u2") == {"n": [2]}
    assert provider.prompts == [("s", "u1"), ("s", "u2")]
    with pytest.raises(RuntimeError, match="no remaining responses"):
        provider.generate_json("s", "u3")


def test_create_provider_auto_without_key_is_offline() -> None:
    assert create_provider("auto") is None
    assert create_provider("offline") is None


def test_create_provider_auto_with_key_uses_openai(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("VIBE_MODEL", "gpt-env")

    provider = create_provider()

    assert isinstance(provider, OpenAIProvider)
    assert provider.model == "gpt-env"


def test_create_provider_reads_mode_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("VIBE_PROVIDER", " Mock ")
    responses = tmp_path / "responses.json"
    responses.write_text(json.dumps([{"stories": []}]), encoding="utf-8")

    provider = create_provider(mock_responses_file=responses)

    assert isinstance(provider, MockProvider)
    assert provider.remaining == 1


def test_create_provider_mock_requires_file() -> None:
    with pytest.raises(ValueError, match="mock responses file"):
        create_provider("mock")


def test_load_mock_responses_validates_items(tmp_path: Path) -> None:
    path = tmp_path / "responses.json"
    path.write_text(json.dumps([{"ok": True}, "nope"]), encoding="utf-8")

    with pytest.raises(ValueError, match="index 1"):
        load_mock_responses(path)


def test_validate_provider_mode_normalizes_and_rejects() -> None:
    assert validate_provider_mode(" OpenAI ") == "openai"
    with pytest.raises(ValueError, match="provider must be one of"):
        validate_provider_mode("anthropic")


def test_require_positive_int_rejects_zero() -> None:
    assert require_positive_int(3, "max_retries") == 3
    with pytest.raises(ValueError, match="max_retries"):
        require_positive_int(0, "max_retries")
