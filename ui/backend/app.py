"""FastAPI application for drafting semantic blueprints."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from openai import OpenAIError

from ui.backend.models import (
    DataModelResponse,
    ExtractStoriesRequest,
    FlowResponse,
    GenerateWireframeRequest,
    HealthResponse,
    LayoutRequest,
    LayoutResponse,
    StoriesPayload,
    StoriesResponse,
    WireframeResponse,
)
from ui.backend.services import BlueprintService
from vibe_architect import __version__
from vibe_architect.blueprint.providers.base import LLMProvider
from vibe_architect.blueprint.providers.factory import create_provider

logger = logging.getLogger(__name__)

# Failures raised while talking to a model, as opposed to bad request input.
_GENERATION_ERRORS = (RuntimeError, OpenAIError)


class BackendState:
    """Holds shared state for the API."""

    def __init__(self, provider: LLMProvider | None, provider_label: str) -> None:
        self.provider_label = provider_label
        self.service = BlueprintService(provider)


def _resolve_state(provider_mode: str | None, provider: LLMProvider | None) -> BackendState:
    if provider is not None:
        return BackendState(provider, type(provider).__name__)
    # A None mode falls back to VIBE_PROVIDER, then auto.
    resolved = create_provider(provider_mode)
    return BackendState(resolved, "offline" if resolved is None else type(resolved).__name__)


def create_app(
    provider_mode: str | None = None, provider: LLMProvider | None = None
) -> FastAPI:
    """Create the FastAPI application.

    An explicit ``provider`` wins over ``provider_mode``; otherwise the mode is
    resolved the same way the CLI resolves it.
    """
    app = FastAPI(title="Vibe Architect API")
    state = _resolve_state(provider_mode, provider)

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok", provider=state.provider_label, version=__version__)

    @app.post("/api/extract-stories", response_model=StoriesResponse)
    def extract_stories(payload: ExtractStoriesRequest) -> StoriesResponse:
        if not payload.prd.strip():
            raise HTTPException(status_code=400, detail="PRD content is required")
        try:
            stories = state.service.extract_stories(payload.prd)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except _GENERATION_ERRORS as exc:
            logger.error("Story extraction failed: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to extract stories") from exc
        return StoriesResponse(stories=stories)

    @app.post("/api/generate-flow", response_model=FlowResponse)
    def generate_flow(payload: StoriesPayload) -> FlowResponse:
        try:
            flow = state.service.generate_flow(payload.stories)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except _GENERATION_ERRORS as exc:
            logger.error("Flow generation failed: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to generate flow") from exc
        return FlowResponse(**flow.to_dict())

    @app.post("/api/generate-erd", response_model=DataModelResponse)
    def generate_erd(payload: StoriesPayload) -> DataModelResponse:
        try:
            model = state.service.generate_erd(payload.stories)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except _GENERATION_ERRORS as exc:
            logger.error("Data model generation failed: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to generate ERD") from exc
        return DataModelResponse(**model.to_dict())

    @app.post("/api/generate-wireframe", response_model=WireframeResponse)
    def generate_wireframe(payload: GenerateWireframeRequest) -> WireframeResponse:
        try:
            shapes, components = state.service.generate_wireframe(
                payload.screen, payload.entities, payload.stories
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except _GENERATION_ERRORS as exc:
            logger.error("Wireframe generation failed: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to generate wireframe") from exc
        return WireframeResponse(shapes=shapes, components=components)

    @app.post("/api/layout", response_model=LayoutResponse)
    def layout_shapes(payload: LayoutRequest) -> LayoutResponse:
        return LayoutResponse(shapes=state.service.layout(payload.shapes))

    return app


app = create_app()
