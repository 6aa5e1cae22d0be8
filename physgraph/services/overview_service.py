"""Graph overview orchestration: load, lay out, switch modes, cache."""

from __future__ import annotations

import asyncio
from enum import Enum

from pydantic import BaseModel, Field

from physgraph.config import Settings, get_settings
from physgraph.graph.backbone import classify_for_mode
from physgraph.graph.builder import GraphModelBuilder
from physgraph.graph.cache import LayoutCache
from physgraph.graph.layouts import layout_chronological, layout_network
from physgraph.graph.models import Edge, GraphModel, LayoutMode, Point, PositionedNode
from physgraph.graph.simulation import PhysicsParams
from physgraph.services.cache_service import CacheService
from physgraph.utils.exceptions import LayoutError
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)


class LayoutState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LAID_OUT = "laid_out"
    RE_LAID_OUT = "re_laid_out"


class LayoutView(BaseModel):
    mode: LayoutMode
    state: LayoutState
    fingerprint: str | None = None
    nodes: list[PositionedNode] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)


class GraphOverviewService:
    """Holds the current model and its layout for one consumer.

    A data load always re-simulates the network layout, warm-started from
    the previous network positions. A mode switch reuses the cached network
    layout when the model is unchanged. Loads and mode switches are
    serialized; mode, nodes and edges are committed together.
    """

    def __init__(
        self,
        builder: GraphModelBuilder,
        settings: Settings | None = None,
        shared_cache: CacheService | None = None,
        params: PhysicsParams | None = None,
    ) -> None:
        self._builder = builder
        self._settings = settings or get_settings()
        self._shared_cache = shared_cache
        self._params = params or PhysicsParams(seed=self._settings.LAYOUT_SEED)
        self._cache = LayoutCache()
        self._lock = asyncio.Lock()

        self._state = LayoutState.UNLOADED
        self._mode = LayoutMode.CHRONOLOGICAL
        self._model: GraphModel | None = None
        self._nodes: list[PositionedNode] = []
        self._edges: list[Edge] = []
        self._network_positions: dict[str, Point] = {}
        self._laid_out_once = False

    @property
    def state(self) -> LayoutState:
        return self._state

    @property
    def mode(self) -> LayoutMode:
        return self._mode

    @property
    def model(self) -> GraphModel | None:
        return self._model

    def view(self) -> LayoutView:
        return LayoutView(
            mode=self._mode,
            state=self._state,
            fingerprint=self._model.fingerprint if self._model else None,
            nodes=self._nodes,
            edges=self._edges,
        )

    async def load(self) -> LayoutView:
        """Fetch a fresh merged model and lay it out for the current mode.

        On any failure the previous model, layout and state stay in place and
        the error propagates to the caller.
        """
        async with self._lock:
            previous_state = self._state
            self._state = LayoutState.LOADING
            try:
                model = await self._builder.fetch_merged_model()
                await self._apply_model(model)
            except BaseException as exc:
                self._state = previous_state
                logger.warning(
                    "graph_load_failed",
                    kept_state=previous_state.value,
                    error_type=type(exc).__name__,
                )
                raise
            return self.view()

    async def use_model(self, model: GraphModel) -> LayoutView:
        """Replace the model wholesale and lay it out without the cache."""
        async with self._lock:
            await self._apply_model(model)
            return self.view()

    async def set_mode(self, mode: LayoutMode | str) -> LayoutView:
        mode = LayoutMode(mode)
        async with self._lock:
            model = self._model
            if model is None:
                raise LayoutError("No graph model loaded")
            if mode is self._mode and self._state in (LayoutState.LAID_OUT, LayoutState.RE_LAID_OUT):
                return self.view()
            nodes, edges = await self._lay_out(model, mode, reuse_cache=True)
            self._commit(model, mode, nodes, edges)
            return self.view()

    async def _apply_model(self, model: GraphModel) -> None:
        self._cache.invalidate()
        nodes, edges = await self._lay_out(model, self._mode, reuse_cache=False)
        self._commit(model, self._mode, nodes, edges)

    async def _lay_out(
        self, model: GraphModel, mode: LayoutMode, reuse_cache: bool
    ) -> tuple[list[PositionedNode], list[Edge]]:
        if mode is LayoutMode.CHRONOLOGICAL:
            nodes = layout_chronological(model, self._settings.CANVAS_WIDTH)
        else:
            nodes = await self._network_nodes(model, reuse_cache)
        edges = classify_for_mode(model, mode, active_ids=[n.id for n in nodes])
        return nodes, edges

    def _commit(
        self,
        model: GraphModel,
        mode: LayoutMode,
        nodes: list[PositionedNode],
        edges: list[Edge],
    ) -> None:
        self._model = model
        self._mode = mode
        self._nodes = nodes
        self._edges = edges
        self._state = LayoutState.RE_LAID_OUT if self._laid_out_once else LayoutState.LAID_OUT
        self._laid_out_once = True
        logger.info(
            "graph_laid_out",
            mode=mode.value,
            state=self._state.value,
            nodes=len(nodes),
            edges=len(edges),
        )

    async def _network_nodes(self, model: GraphModel, reuse_cache: bool) -> list[PositionedNode]:
        fingerprint = model.fingerprint
        if reuse_cache:
            cached = self._cache.get(fingerprint)
            if cached is not None:
                logger.debug("network_layout_cache_hit", source="memory", fingerprint=fingerprint)
                return cached
            if self._shared_cache is not None:
                # Outlives loads, so keyed by content rather than fingerprint
                shared = await self._shared_cache.get_network_layout(model.content_key)
                if shared is not None:
                    logger.debug("network_layout_cache_hit", source="redis", fingerprint=fingerprint)
                    nodes = self._rebind(model, shared)
                    self._remember(fingerprint, nodes)
                    return nodes

        nodes = layout_network(
            model,
            previous_positions=self._network_positions,
            params=self._params,
            iterations=self._settings.NETWORK_ITERATIONS,
        )
        self._remember(fingerprint, nodes)
        if self._shared_cache is not None:
            await self._shared_cache.cache_network_layout(model.content_key, nodes)
        return nodes

    def _remember(self, fingerprint: str, nodes: list[PositionedNode]) -> None:
        self._cache.put(fingerprint, nodes)
        self._network_positions = {n.id: Point(x=n.x, y=n.y) for n in nodes}

    @staticmethod
    def _rebind(model: GraphModel, cached: list[PositionedNode]) -> list[PositionedNode]:
        """Current model nodes at the cached coordinates."""
        coords = {n.id: (n.x, n.y) for n in cached}
        return [
            PositionedNode(node=node, x=coords[node.id][0], y=coords[node.id][1])
            for node in model.nodes
        ]
