"""CLI tests for vibe-architect commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vibe_architect import __version__
from vibe_architect.cli import app

runner = CliRunner()


def _invoke(tmp_path: Path, *args: str):
    return runner.invoke(app, ["--log-file", str(tmp_path / "run.log"), *args])


def test_version_prints_package_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_layout_outputs_positioned_json(tmp_path: Path) -> None:
    shapes = tmp_path / "shapes.json"
    shapes.write_text(
        json.dumps({"shapes": [{"type": "button", "label": "Save"}, {"type": "navbar"}]}),
        encoding="utf-8",
    )

    result = _invoke(tmp_path, "layout", str(shapes))

    assert result.exit_code == 0
    positioned = json.loads(result.stdout)["shapes"]
    assert positioned[0]["type"] == "navbar"
    assert positioned[1]["x"] + positioned[1]["width"] == 1008.0


def test_layout_writes_output_file(tmp_path: Path) -> None:
    shapes = tmp_path / "shapes.json"
    shapes.write_text(json.dumps([{"type": "card", "label": "A"}]), encoding="utf-8")
    output = tmp_path / "out" / "layout.json"

    result = _invoke(tmp_path, "layout", str(shapes), "--output", str(output))

    assert result.exit_code == 0
    written = json.loads(output.read_text(encoding="utf-8"))
    assert written["shapes"][0]["width"] == 992.0


def test_layout_rejects_non_list_input(tmp_path: Path) -> None:
    shapes = tmp_path / "shapes.json"
    shapes.write_text(json.dumps({"type": "card"}), encoding="utf-8")

    result = _invoke(tmp_path, "layout", str(shapes))

    assert result.exit_code != 0


def test_stories_offline_renders_table(tmp_path: Path) -> None:
    result = _invoke(
        tmp_path, "stories", "--prd-text", "Teams share documents.", "--provider", "offline"
    )

    assert result.exit_code == 0
    assert "User Stories" in result.stdout
    assert "P0" in result.stdout


def test_stories_requires_exactly_one_prd_source(tmp_path: Path) -> None:
    prd = tmp_path / "prd.md"
    prd.write_text("Something", encoding="utf-8")

    missing = _invoke(tmp_path, "stories", "--provider", "offline")
    both = _invoke(
        tmp_path, "stories", "--prd-file", str(prd), "--prd-text", "x", "--provider", "offline"
    )

    assert missing.exit_code != 0
    assert both.exit_code != 0


def test_stories_mock_provider_without_file_is_usage_error(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "stories", "--prd-text", "Something", "--provider", "mock")
    assert result.exit_code != 0


def test_draft_with_mock_responses(tmp_path: Path) -> None:
    responses = tmp_path / "responses.json"
    responses.write_text(
        json.dumps(
            [
                {
                    "stories": [
                        {
                            "role": "reader",
                            "action": "bookmark articles",
                            "benefit": "I can read later",
                            "isMvp": True,
                            "priority": "P1",
                        }
                    ]
                },
                {"nodes": [{"type": "screen", "label": "Reading List"}], "edges": []},
                {"entities": [{"name": "Bookmark", "attributes": []}]},
                {"components": [{"type": "list", "label": "Saved"}]},
            ]
        ),
        encoding="utf-8",
    )

    result = _invoke(
        tmp_path,
        "draft",
        "--prd-text",
        "Readers bookmark articles.",
        "--name",
        "Reader",
        "--provider",
        "mock",
        "--mock-responses-file",
        str(responses),
    )

    assert result.exit_code == 0
    assert "Blueprint: Reader" in result.stdout
    assert "Reading List" in result.stdout
    assert "/reading-list" in result.stdout


def test_draft_offline_writes_run_log(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "--verbose", "draft", "--prd-text", "Plan trips.")

    assert result.exit_code == 0
    log_text = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "Created 5 screens from user flow." in log_text


def test_stories_reads_provider_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("VIBE_PROVIDER", "offline")

    result = _invoke(tmp_path, "stories", "--prd-text", "Teams share documents.")

    assert result.exit_code == 0
    assert "User Stories" in result.stdout


def test_stories_environment_mock_provider_needs_responses(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("VIBE_PROVIDER", "mock")

    result = _invoke(tmp_path, "stories", "--prd-text", "Something")

    assert result.exit_code != 0


def test_stories_generation_failure_exits_cleanly(tmp_path: Path) -> None:
    responses = tmp_path / "responses.json"
    responses.write_text("[]", encoding="utf-8")

    result = _invoke(
        tmp_path,
        "stories",
        "--prd-text",
        "Something",
        "--provider",
        "mock",
        "--mock-responses-file",
        str(responses),
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Story extraction failed" in result.stdout


def test_draft_generation_failure_exits_cleanly(tmp_path: Path) -> None:
    responses = tmp_path / "responses.json"
    responses.write_text("[]", encoding="utf-8")

    result = _invoke(
        tmp_path,
        "draft",
        "--prd-text",
        "Something",
        "--provider",
        "mock",
        "--mock-responses-file",
        str(responses),
    )

    assert result.exit_code == 1
    assert "Blueprint drafting failed" in result.stdout


def test_json_logs_flag_writes_json_lines(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "--json-logs", "draft", "--prd-text", "Plan trips.")

    assert result.exit_code == 0
    lines = (tmp_path / "run.log").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert "Created 5 screens from user flow." in [record["message"] for record in records]
