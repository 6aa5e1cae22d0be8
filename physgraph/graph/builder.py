"""Builds the graph model from the static taxonomy and the persisted store."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from physgraph.graph.models import (
    Edge,
    EdgeKind,
    FieldNode,
    GraphModel,
    Node,
    RootNode,
    TopicNode,
    parse_time_value,
)
from physgraph.graph.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from physgraph.utils.logging import get_logger

if TYPE_CHECKING:
    from physgraph.services.graph_store import GraphStore

logger = get_logger(__name__)

ROOT_ID = "root"
ROOT_LABEL = "PHYSICS"


def build_static_model(taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> GraphModel:
    """Root, fields and topics from the taxonomy. No I/O."""
    nodes: list[Node] = [RootNode(id=ROOT_ID, label=ROOT_LABEL)]
    edges: list[Edge] = []
    seen: set[str] = {ROOT_ID}

    for field in taxonomy.fields:
        if field.id in seen:
            logger.warning("taxonomy_duplicate_id", node_id=field.id, kind="field")
            continue
        seen.add(field.id)
        nodes.append(FieldNode(
            id=field.id,
            label=field.name,
            description=field.description,
            color=field.color,
        ))
        edges.append(Edge(source=ROOT_ID, target=field.id, kind=EdgeKind.HIERARCHY))

        topics: list[TopicNode] = []
        for topic in taxonomy.topics:
            if topic.field_id != field.id:
                continue
            if topic.id in seen:
                logger.warning("taxonomy_duplicate_id", node_id=topic.id, kind="topic")
                continue
            seen.add(topic.id)
            topics.append(TopicNode(
                id=topic.id,
                label=topic.title,
                description=topic.summary,
                group_key=field.id,
                time_value=parse_time_value(topic.year),
                slug=topic.slug,
            ))

        # Unknown years sort after every known one
        topics.sort(key=lambda t: (t.time_value is None, t.time_value or 0.0, t.id))
        previous: TopicNode | None = None
        for topic_node in topics:
            nodes.append(topic_node)
            edges.append(Edge(source=field.id, target=topic_node.id, kind=EdgeKind.HIERARCHY))
            if previous is not None:
                edges.append(Edge(source=previous.id, target=topic_node.id, kind=EdgeKind.TEMPORAL))
            previous = topic_node

    return GraphModel(nodes=nodes, edges=edges)


def merge_models(
    static: GraphModel,
    nodes: Iterable[Node],
    edges: Iterable[Edge],
) -> GraphModel:
    """Overlay persisted nodes/edges on the static model.

    A persisted node replaces the static node with the same id, keeping its
    place in the node order. Edges are unioned, one per (source, target, kind).
    """
    merged: dict[str, Node] = {node.id: node for node in static.nodes}
    overwritten = 0
    for node in nodes:
        if node.id in merged:
            overwritten += 1
        merged[node.id] = node

    unique: dict[tuple[str, str, EdgeKind], Edge] = {}
    for edge in [*static.edges, *edges]:
        unique.setdefault(edge.key, edge)

    logger.debug(
        "graph_model_merged",
        nodes=len(merged),
        edges=len(unique),
        overwritten=overwritten,
    )
    return GraphModel(nodes=list(merged.values()), edges=list(unique.values()))


class GraphModelBuilder:
    """Produces merged models from the taxonomy plus the persisted store."""

    def __init__(self, store: GraphStore, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> None:
        self._store = store
        self._taxonomy = taxonomy

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def build_static_model(self) -> GraphModel:
        return build_static_model(self._taxonomy)

    async def fetch_merged_model(self) -> GraphModel:
        """Read every persisted node and edge and merge them over the static model.

        Raises:
            DataUnavailable: the store could not be read. Not retried here.
        """
        nodes = await self._store.fetch_nodes()
        edges = await self._store.fetch_edges()
        model = merge_models(self.build_static_model(), nodes, edges)
        logger.info(
            "graph_model_loaded",
            nodes=len(model.nodes),
            edges=len(model.edges),
            fingerprint=model.fingerprint,
        )
        return model
