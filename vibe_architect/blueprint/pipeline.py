"""End-to-end drafting: PRD -> stories -> flow -> data model -> screens."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from vibe_architect.blueprint.erd_generator import ErdGenerator
from vibe_architect.blueprint.flow_generator import FlowGenerator
from vibe_architect.blueprint.models import Phase, WireframeComponent
from vibe_architect.blueprint.providers.base import LLMProvider
from vibe_architect.blueprint.store import BlueprintStore
from vibe_architect.blueprint.story_extractor import StoryExtractor
from vibe_architect.blueprint.wireframe_generator import WireframeGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineSummary:
    """Counts reported after a drafting run."""

    story_count: int
    mvp_story_count: int
    flow_node_count: int
    entity_count: int
    screen_count: int
    component_count: int


class BlueprintPipeline:
    """Runs every generator in phase order against one store."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        self.stories = StoryExtractor(provider)
        self.flow = FlowGenerator(provider)
        self.erd = ErdGenerator(provider)
        self.wireframes = WireframeGenerator(provider)

    def run(self, prd: str, *, name: str = "Untitled Project") -> BlueprintStore:
        store = BlueprintStore()
        store.create_new_blueprint(name)
        store.set_raw_prd(prd)
        store.set_ai_processing(True)
        try:
            store.set_stories(self.stories.extract(prd))
            # Architecture is derived from MVP scope when one has been marked.
            scoped = store.mvp_stories() or list(store.blueprint.stories)

            store.set_phase(Phase.architecture)
            flow = self.flow.generate(scoped)
            store.set_flow(flow.nodes, flow.edges)
            data_model = self.erd.generate(scoped)
            store.set_data_model(data_model.entities, data_model.relationships)

            store.set_phase(Phase.design)
            store.sync_screens_from_flow()
            stories_by_id = {story.story_id: story for story in store.blueprint.stories}
            for screen in store.blueprint.screens:
                linked = [
                    stories_by_id[story_id]
                    for story_id in screen.linked_story_ids
                    if story_id in stories_by_id
                ]
                shapes = self.wireframes.generate(screen.name, store.blueprint.entities, linked)
                store.set_components(
                    screen.screen_id, [WireframeComponent.from_shape(shape) for shape in shapes]
                )
        except Exception as exc:
            store.set_ai_error(str(exc))
            logger.error("Blueprint drafting failed: %s", exc)
            raise
        finally:
            store.set_ai_processing(False)
        store.set_phase(Phase.export)
        return store

    @staticmethod
    def summarize(store: BlueprintStore) -> PipelineSummary:
        blueprint = store.blueprint
        return PipelineSummary(
            story_count=len(blueprint.stories),
            mvp_story_count=len(store.mvp_stories()),
            flow_node_count=len(blueprint.flow_nodes),
            entity_count=len(blueprint.entities),
            screen_count=len(blueprint.screens),
            component_count=sum(len(screen.components) for screen in blueprint.screens),
        )
