"""Pydantic models for the blueprint API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ExtractStoriesRequest(BaseModel):
    """Request payload for story extraction."""

    prd: str = ""


class StoriesPayload(BaseModel):
    """Request payload carrying user stories in camelCase JSON form."""

    stories: list[dict[str, Any]] = Field(default_factory=list)


class GenerateWireframeRequest(BaseModel):
    """Request payload for wireframe generation.

    ``screen`` is either a screen name or a screen object carrying ``name``.
    """

    screen: str | dict[str, Any] | None = None
    entities: list[dict[str, Any]] = Field(default_factory=list)
    stories: list[dict[str, Any]] = Field(default_factory=list)


class LayoutRequest(BaseModel):
    """Request payload for the layout engine; shapes are passed through leniently."""

    shapes: list[dict[str, Any]]


class StoriesResponse(BaseModel):
    """Serialized user stories."""

    stories: list[dict[str, Any]]


class FlowResponse(BaseModel):
    """Serialized user flow."""

    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]


class DataModelResponse(BaseModel):
    """Serialized entity-relationship model."""

    entities: list[dict[str, Any]]
    relationships: list[dict[str, Any]]


class WireframeResponse(BaseModel):
    """Positioned shapes plus the same elements in wireframe component form."""

    shapes: list[dict[str, Any]]
    components: list[dict[str, Any]]


class LayoutResponse(BaseModel):
    """Positioned shapes."""

    shapes: list[dict[str, Any]]


class HealthResponse(BaseModel):
    """Service liveness and active provider mode."""

    status: str
    provider: str
    version: str
