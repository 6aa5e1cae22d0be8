"""Per-mode edge sets, including the synthesized chronological backbone."""

from __future__ import annotations

from collections.abc import Collection
from itertools import pairwise

from physgraph.graph.models import (
    Edge,
    EdgeKind,
    GraphModel,
    LayoutMode,
    TopicNode,
)
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)

_STRUCTURAL_KINDS = frozenset({EdgeKind.HIERARCHY, EdgeKind.TEMPORAL})


def synthesize_backbone(model: GraphModel) -> list[Edge]:
    """Chain each group's timed topics in time order.

    Emits ``field -> earliest topic`` (hierarchy) and one ``run`` edge per
    consecutive pair. Equal times are ordered by id.
    """
    groups: dict[str, list[TopicNode]] = {}
    for node in model.nodes:
        if isinstance(node, TopicNode) and node.group_key and node.time_value is not None:
            groups.setdefault(node.group_key, []).append(node)

    edges: list[Edge] = []
    for group_key, topics in groups.items():
        topics.sort(key=lambda t: (t.time_value, t.id))
        edges.append(Edge(source=group_key, target=topics[0].id, kind=EdgeKind.HIERARCHY))
        for earlier, later in pairwise(topics):
            edges.append(Edge(source=earlier.id, target=later.id, kind=EdgeKind.RUN))
    return edges


def _redundant_with_backbone(edge: Edge, model: GraphModel) -> bool:
    """Stored structural edge between two timed topics of the same group."""
    if edge.kind not in _STRUCTURAL_KINDS:
        return False
    source = model.node_index.get(edge.source)
    target = model.node_index.get(edge.target)
    if not isinstance(source, TopicNode) or not isinstance(target, TopicNode):
        return False
    if source.time_value is None or target.time_value is None:
        return False
    return source.group_key is not None and source.group_key == target.group_key


def _keep_chronological(edge: Edge, model: GraphModel) -> bool:
    if edge.kind in (EdgeKind.TEMPORAL, EdgeKind.MENTIONS):
        return True
    if edge.kind is EdgeKind.HIERARCHY:
        source = model.node_index.get(edge.source)
        return source is not None and source.kind in ("field", "topic")
    return False


def classify_for_mode(
    model: GraphModel,
    mode: LayoutMode,
    active_ids: Collection[str] | None = None,
) -> list[Edge]:
    """Edge list for ``mode``, restricted to edges whose endpoints are active.

    ``active_ids`` defaults to every node of the model.
    """
    mode = LayoutMode(mode)
    if mode is LayoutMode.CHRONOLOGICAL:
        candidates = [e for e in model.edges if _keep_chronological(e, model)]
    else:
        candidates = [e for e in model.edges if not _redundant_with_backbone(e, model)]
        candidates.extend(synthesize_backbone(model))

    active = set(model.node_index) if active_ids is None else set(active_ids)
    unique: dict[tuple[str, str, EdgeKind], Edge] = {}
    dangling = 0
    for edge in candidates:
        if edge.source not in active or edge.target not in active:
            dangling += 1
            continue
        unique.setdefault(edge.key, edge)

    if dangling:
        logger.debug("dangling_edges_dropped", mode=mode.value, count=dangling)
    return list(unique.values())
