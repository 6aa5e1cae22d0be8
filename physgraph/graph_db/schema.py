"""Neo4j schema initialization for the topic graph."""

from __future__ import annotations

from neo4j.exceptions import Neo4jError

from physgraph.graph_db.connection import Neo4jConnection
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)

CONSTRAINTS = [
    "CREATE CONSTRAINT graph_node_id IF NOT EXISTS FOR (n:GraphNode) REQUIRE n.id IS UNIQUE",
]

INDEXES = [
    "CREATE INDEX graph_node_kind IF NOT EXISTS FOR (n:GraphNode) ON (n.kind)",
    "CREATE INDEX graph_node_label IF NOT EXISTS FOR (n:GraphNode) ON (n.label)",
    "CREATE INDEX graph_link_kind IF NOT EXISTS FOR ()-[r:LINK]-() ON (r.kind)",
]


async def init_schema(conn: Neo4jConnection) -> None:
    """Create all constraints and indexes on the Neo4j database."""
    for stmt in CONSTRAINTS + INDEXES:
        try:
            await conn.execute_write(stmt)
        except Neo4jError as exc:
            logger.warning("schema_statement_skipped", statement=stmt, error=str(exc))

    logger.info("neo4j_schema_initialized")
