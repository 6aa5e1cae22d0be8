"""Persisted graph store: bulk reads and idempotent upserts over Neo4j."""

from __future__ import annotations

from collections.abc import Iterable

from neo4j.exceptions import DriverError, Neo4jError

from physgraph.graph.models import (
    Edge,
    EdgeKind,
    Node,
    edge_from_record,
    node_from_record,
    node_to_record,
)
from physgraph.graph_db.connection import Neo4jConnection
from physgraph.graph_db.queries import (
    ALL_EDGES,
    ALL_NODES,
    DELETE_EDGES_FROM,
    FIND_NODES_BY_LABEL,
    UPSERT_EDGES,
    UPSERT_NODE,
)
from physgraph.utils.exceptions import DataUnavailable, GraphStoreError
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)

# Driver not connected (RuntimeError) or socket-level failures count as unreachable
_STORE_ERRORS = (Neo4jError, DriverError, OSError, RuntimeError)


class GraphStore:
    """Reads and writes the persisted nodes/edges collections."""

    def __init__(self, neo4j_conn: Neo4jConnection) -> None:
        self._conn = neo4j_conn

    async def fetch_nodes(self) -> list[Node]:
        try:
            rows = await self._conn.execute_read(ALL_NODES)
        except _STORE_ERRORS as exc:
            logger.error("graph_store_read_failed", collection="nodes", error=str(exc))
            raise DataUnavailable(f"Could not read nodes: {exc}") from exc
        nodes = [node_from_record(row["node"]) for row in rows]
        return [n for n in nodes if n is not None]

    async def fetch_edges(self) -> list[Edge]:
        try:
            rows = await self._conn.execute_read(ALL_EDGES)
        except _STORE_ERRORS as exc:
            logger.error("graph_store_read_failed", collection="edges", error=str(exc))
            raise DataUnavailable(f"Could not read edges: {exc}") from exc
        edges = [edge_from_record(row) for row in rows]
        return [e for e in edges if e is not None]

    async def find_node_by_label(self, label: str) -> Node | None:
        """Case-insensitive label lookup; concepts win over other kinds."""
        try:
            rows = await self._conn.execute_read(FIND_NODES_BY_LABEL, label=label)
        except _STORE_ERRORS as exc:
            raise DataUnavailable(f"Could not look up '{label}': {exc}") from exc
        if not rows:
            return None
        return node_from_record(rows[0]["node"])

    async def upsert_node(self, node: Node) -> None:
        try:
            await self._conn.execute_write(UPSERT_NODE, id=node.id, properties=node_to_record(node))
        except _STORE_ERRORS as exc:
            logger.error("graph_node_upsert_failed", node_id=node.id, error=str(exc))
            raise GraphStoreError(f"Could not write node {node.id}: {exc}") from exc

    async def upsert_edges(self, edges: Iterable[Edge]) -> int:
        """MERGE edges on (source, target, kind); self-loops are dropped."""
        unique = {e.key: e for e in edges if e.source != e.target}
        if not unique:
            return 0
        payload = [
            {"source": e.source, "target": e.target, "kind": e.kind.value}
            for e in unique.values()
        ]
        try:
            await self._conn.execute_write(UPSERT_EDGES, edges=payload)
        except _STORE_ERRORS as exc:
            logger.error("graph_edges_upsert_failed", count=len(payload), error=str(exc))
            raise GraphStoreError(f"Could not write {len(payload)} edges: {exc}") from exc
        return len(payload)

    async def delete_edges_from(self, source: str, kind: EdgeKind) -> None:
        try:
            await self._conn.execute_write(DELETE_EDGES_FROM, source=source, kind=kind.value)
        except _STORE_ERRORS as exc:
            raise GraphStoreError(f"Could not delete {kind.value} edges of {source}: {exc}") from exc
