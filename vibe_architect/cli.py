"""Command-line interface for drafting semantic blueprints."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from openai import OpenAIError
from rich.console import Console
from rich.table import Table

from vibe_architect import __version__
from vibe_architect.blueprint.layout import layout_records
from vibe_architect.blueprint.pipeline import BlueprintPipeline
from vibe_architect.blueprint.providers.base import LLMProvider
from vibe_architect.blueprint.providers.factory import create_provider
from vibe_architect.blueprint.story_extractor import StoryExtractor
from vibe_architect.logging_utils import configure_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _load_prd(prd_file: Path | None, prd_text: str | None) -> str:
    """Load PRD text from file or inline input with mutual exclusivity validation."""
    if prd_file is None and prd_text is None:
        raise typer.BadParameter("Provide --prd-file or --prd-text.")
    if prd_file is not None and prd_text is not None:
        raise typer.BadParameter("Use either --prd-file or --prd-text, not both.")
    if prd_file is not None:
        return prd_file.read_text(encoding="utf-8")
    return prd_text or ""


def _create_provider(
    provider: str | None,
    model: str | None,
    mock_responses_file: Path | None,
) -> LLMProvider | None:
    """Create a model provider from CLI options, mapping errors to usage errors."""
    try:
        return create_provider(provider, model=model, mock_responses_file=mock_responses_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_shape_records(input_file: Path) -> list[dict[str, Any]]:
    """Read a JSON list of shapes, or an object with a 'shapes' list."""
    try:
        raw = json.loads(input_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{input_file} is not valid JSON: {exc}") from exc
    if isinstance(raw, dict):
        raw = raw.get("shapes")
    if not isinstance(raw, list):
        raise typer.BadParameter("Input must be a JSON list of shapes or {'shapes': [...]}.")
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise typer.BadParameter(f"Shape index {index} is not an object.")
    return raw


def _version_callback(value: bool) -> None:
    if value:
        console.print(__version__)
        raise typer.Exit()


ProviderOption = Annotated[
    str | None,
    typer.Option(help="Model provider: auto, openai, offline or mock (default: $VIBE_PROVIDER)."),
]
ModelOption = Annotated[
    str | None,
    typer.Option(help="Model name when using the OpenAI provider."),
]
MockResponsesOption = Annotated[
    Path | None,
    typer.Option(help="JSON file of queued responses when provider=mock."),
]


@app.callback()
def main(
    log_file: Annotated[
        Path,
        typer.Option(help="Log file written for this run."),
    ] = Path(".vibe_architect/vibe.log"),
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--quiet", help="Enable debug logging."),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Write the log file as JSON lines."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Draft semantic blueprints (stories, flows, data models, wireframes) from PRDs."""
    configure_logging(log_file=log_file, verbose=verbose, json_format=json_logs)


@app.command()
def layout(
    input_file: Annotated[
        Path,
        typer.Argument(help="JSON file with the shapes to position.", exists=True, dir_okay=False),
    ],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", help="Write positioned shapes here instead of stdout."),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table/--json", help="Render a table instead of JSON."),
    ] = False,
) -> None:
    """Compute wireframe geometry for a list of typed shapes."""
    positioned = layout_records(_load_shape_records(input_file))
    if output_file is not None:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps({"shapes": positioned}, indent=2), encoding="utf-8")
        console.print(f"Wrote {len(positioned)} shapes to {output_file}")
        return
    if not table:
        typer.echo(json.dumps({"shapes": positioned}, indent=2))
        return
    rendered = Table(title="Wireframe Layout")
    for column in ("Type", "Label", "X", "Y", "Width", "Height"):
        rendered.add_column(column)
    for shape in positioned:
        rendered.add_row(
            shape["type"],
            shape["label"],
            f"{shape['x']:.1f}",
            f"{shape['y']:.1f}",
            f"{shape['width']:.1f}",
            f"{shape['height']:.1f}",
        )
    console.print(rendered)


@app.command()
def stories(
    prd_file: Annotated[
        Path | None,
        typer.Option(help="Path to the product requirements document."),
    ] = None,
    prd_text: Annotated[
        str | None,
        typer.Option(help="Inline product requirements text."),
    ] = None,
    provider: ProviderOption = None,
    model: ModelOption = None,
    mock_responses_file: MockResponsesOption = None,
) -> None:
    """Extract user stories from a PRD."""
    prd = _load_prd(prd_file, prd_text)
    extractor = StoryExtractor(_create_provider(provider, model, mock_responses_file))
    try:
        extracted = extractor.extract(prd)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except (RuntimeError, OpenAIError) as exc:
        console.print(f"[red]Story extraction failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    rendered = Table(title="User Stories")
    rendered.add_column("Priority")
    rendered.add_column("MVP")
    rendered.add_column("Story")
    for story in extracted:
        rendered.add_row(story.priority, "yes" if story.is_mvp else "", story.statement)
    console.print(rendered)


@app.command()
def draft(
    prd_file: Annotated[
        Path | None,
        typer.Option(help="Path to the product requirements document."),
    ] = None,
    prd_text: Annotated[
        str | None,
        typer.Option(help="Inline product requirements text."),
    ] = None,
    name: Annotated[
        str,
        typer.Option(help="Blueprint name."),
    ] = "Untitled Project",
    provider: ProviderOption = None,
    model: ModelOption = None,
    mock_responses_file: MockResponsesOption = None,
) -> None:
    """Run every phase and print a summary of the resulting blueprint."""
    prd = _load_prd(prd_file, prd_text)
    pipeline = BlueprintPipeline(_create_provider(provider, model, mock_responses_file))
    try:
        store = pipeline.run(prd, name=name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except (RuntimeError, OpenAIError) as exc:
        console.print(f"[red]Blueprint drafting failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    summary = BlueprintPipeline.summarize(store)

    rendered = Table(title=f"Blueprint: {store.blueprint.name}")
    rendered.add_column("Field")
    rendered.add_column("Value")
    rendered.add_row("Stories", f"{summary.mvp_story_count} MVP / {summary.story_count} total")
    rendered.add_row("Flow Nodes", str(summary.flow_node_count))
    rendered.add_row("Entities", str(summary.entity_count))
    rendered.add_row("Screens", str(summary.screen_count))
    rendered.add_row("Components", str(summary.component_count))
    console.print(rendered)

    screens = Table(title="Screens")
    screens.add_column("Name")
    screens.add_column("Path")
    screens.add_column("Components")
    for screen in store.blueprint.screens:
        screens.add_row(
            screen.name,
            screen.path,
            ", ".join(component.type for component in screen.components),
        )
    console.print(screens)


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8000,
    reload: Annotated[bool, typer.Option("--reload/--no-reload")] = False,
) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    if port <= 0:
        raise typer.BadParameter("port must be greater than zero.")
    uvicorn.run("ui.backend.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
