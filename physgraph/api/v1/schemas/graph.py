"""Request/response models for the graph API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from physgraph.graph.models import (
    ConceptNode,
    EdgeKind,
    FieldNode,
    LayoutMode,
    PositionedNode,
    TopicNode,
)
from physgraph.services.concept_service import ContentSource
from physgraph.services.overview_service import LayoutState, LayoutView


class GraphNodeOut(BaseModel):
    id: str
    kind: str
    label: str
    x: float
    y: float
    group_key: str | None = None
    time_value: float | None = None
    description: str | None = None
    slug: str | None = None
    color: str | None = None

    @classmethod
    def from_positioned(cls, positioned: PositionedNode) -> GraphNodeOut:
        node = positioned.node
        return cls(
            id=node.id,
            kind=node.kind,
            label=node.label,
            x=positioned.x,
            y=positioned.y,
            group_key=node.group_key,
            time_value=positioned.time_value,
            description=node.description,
            slug=node.slug if isinstance(node, (TopicNode, ConceptNode)) else None,
            color=node.color if isinstance(node, FieldNode) else None,
        )


class GraphEdgeOut(BaseModel):
    source: str
    target: str
    kind: EdgeKind


class GraphLayoutResponse(BaseModel):
    mode: LayoutMode
    state: LayoutState
    fingerprint: str | None = None
    nodes: list[GraphNodeOut] = Field(default_factory=list)
    edges: list[GraphEdgeOut] = Field(default_factory=list)
    node_count: int = 0
    edge_count: int = 0

    @classmethod
    def from_view(cls, view: LayoutView) -> GraphLayoutResponse:
        nodes = [GraphNodeOut.from_positioned(n) for n in view.nodes]
        edges = [GraphEdgeOut(source=e.source, target=e.target, kind=e.kind) for e in view.edges]
        return cls(
            mode=view.mode,
            state=view.state,
            fingerprint=view.fingerprint,
            nodes=nodes,
            edges=edges,
            node_count=len(nodes),
            edge_count=len(edges),
        )


class ContentEdgesRequest(BaseModel):
    source: ContentSource
    content: str = ""


class ContentEdgesResponse(BaseModel):
    source_id: str
    target_ids: list[str] = Field(default_factory=list)
