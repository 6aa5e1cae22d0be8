"""Node, edge and model types for the physics topic graph."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from physgraph.utils.logging import get_logger
from physgraph.utils.text_processing import content_hash

logger = get_logger(__name__)


class EdgeKind(str, Enum):
    HIERARCHY = "hierarchy"
    TEMPORAL = "temporal"
    MENTIONS = "mentions"
    RUN = "run"


class LayoutMode(str, Enum):
    CHRONOLOGICAL = "chronological"
    NETWORK = "network"


NodeKind = Literal["root", "field", "topic", "concept", "section"]


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


# ── Node variants ────────────────────────────────────────────────────


class _NodeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str | None = None
    group_key: str | None = None
    pinned: Point | None = None


class RootNode(_NodeBase):
    kind: Literal["root"] = "root"


class FieldNode(_NodeBase):
    """A field of physics; defines its own angular sector and lane."""

    kind: Literal["field"] = "field"
    color: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_group_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("group_key") is None and data.get("id"):
            return {**data, "group_key": data["id"]}
        return data


class TopicNode(_NodeBase):
    kind: Literal["topic"] = "topic"
    time_value: float | None = None
    slug: str | None = None


class ConceptNode(_NodeBase):
    kind: Literal["concept"] = "concept"
    slug: str | None = None


class SectionNode(_NodeBase):
    kind: Literal["section"] = "section"
    topic_id: str | None = None


Node = Annotated[
    Union[RootNode, FieldNode, TopicNode, ConceptNode, SectionNode],
    Field(discriminator="kind"),
]


def time_of(node: Node) -> float | None:
    """Time value of a node; only topics carry one."""
    if isinstance(node, TopicNode):
        return node.time_value
    return None


# ── Edges and the aggregate model ────────────────────────────────────


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    kind: EdgeKind

    @property
    def key(self) -> tuple[str, str, EdgeKind]:
        return (self.source, self.target, self.kind)


class GraphModel(BaseModel):
    """One loaded snapshot of the graph. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    @cached_property
    def node_index(self) -> dict[str, Node]:
        return {node.id: node for node in self.nodes}

    @cached_property
    def fingerprint(self) -> str:
        """Structural key over the sorted node ids."""
        return content_hash("\n".join(sorted(node.id for node in self.nodes)))

    @cached_property
    def content_key(self) -> str:
        """Key over every node attribute and edge, for caches that outlive a load."""
        return content_hash(self.model_dump_json())


class PositionedNode(BaseModel):
    """A node plus the coordinates a layout assigned to it."""

    node: Node
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def kind(self) -> str:
        return self.node.kind

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def group_key(self) -> str | None:
        return self.node.group_key

    @property
    def time_value(self) -> float | None:
        return time_of(self.node)


@dataclass
class SimulationNode:
    """Physics-only projection of a node."""

    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    pinned: bool = False


# ── Store record conversion ──────────────────────────────────────────

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_NODE_TYPES: dict[str, type[_NodeBase]] = {
    "root": RootNode,
    "field": FieldNode,
    "topic": TopicNode,
    "concept": ConceptNode,
    "section": SectionNode,
}


def parse_time_value(raw: Any) -> float | None:
    """Parse a year-like attribute from its leading integer.

    ``"1905s"`` and ``"1687-1690"`` read as 1905 and 1687; negative years are
    kept. Text with no leading integer, and ``0`` (written by the store for
    topics created without a year), mean unknown time.
    """
    if raw is None or isinstance(raw, bool):
        return None
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    value = int(match.group(1))
    return float(value) if value else None


def node_from_record(record: dict[str, Any]) -> Node | None:
    """Build a node from a store record (flat property bag)."""
    kind = str(record.get("kind") or "")
    node_type = _NODE_TYPES.get(kind)
    node_id = record.get("id")
    if node_type is None or not node_id:
        logger.warning("store_node_skipped", node_id=node_id, kind=kind)
        return None

    fields: dict[str, Any] = {
        "id": str(node_id),
        "label": str(record.get("label") or node_id),
        "description": record.get("description"),
        "group_key": record.get("group_key"),
    }
    if record.get("pinned_x") is not None and record.get("pinned_y") is not None:
        fields["pinned"] = {"x": record["pinned_x"], "y": record["pinned_y"]}
    if node_type is TopicNode:
        fields["time_value"] = parse_time_value(record.get("time_value"))
    if node_type in (TopicNode, ConceptNode):
        fields["slug"] = record.get("slug")
    if node_type is SectionNode:
        fields["topic_id"] = record.get("topic_id")
    if node_type is FieldNode:
        fields["color"] = record.get("color")
    try:
        return node_type(**fields)
    except ValidationError as exc:
        logger.warning("store_node_invalid", node_id=node_id, kind=kind, errors=exc.error_count())
        return None


def node_to_record(node: Node) -> dict[str, Any]:
    """Flatten a node into store properties (Neo4j has no nested maps)."""
    record = node.model_dump(exclude={"pinned"}, exclude_none=True)
    if node.pinned is not None:
        record["pinned_x"] = node.pinned.x
        record["pinned_y"] = node.pinned.y
    return record


def edge_from_record(record: dict[str, Any]) -> Edge | None:
    source, target = record.get("source"), record.get("target")
    try:
        kind = EdgeKind(str(record.get("kind") or ""))
    except ValueError:
        logger.warning("store_edge_skipped", source=source, target=target, kind=record.get("kind"))
        return None
    if not source or not target:
        return None
    return Edge(source=str(source), target=str(target), kind=kind)
