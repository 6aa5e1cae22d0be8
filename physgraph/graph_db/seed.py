"""Schema initialization and seeding of the store from the static taxonomy."""

from __future__ import annotations

import asyncio

from physgraph.config import get_settings
from physgraph.graph.builder import build_static_model
from physgraph.graph.models import GraphModel
from physgraph.graph_db.connection import Neo4jConnection
from physgraph.graph_db.schema import init_schema
from physgraph.services.graph_store import GraphStore
from physgraph.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def seed_model(store: GraphStore, model: GraphModel) -> None:
    """Upsert every node and edge of ``model``; safe to run repeatedly."""
    for node in model.nodes:
        await store.upsert_node(node)
    written = await store.upsert_edges(model.edges)
    logger.info("store_seeded", nodes=len(model.nodes), edges=written)


async def seed() -> None:
    settings = get_settings()
    conn = Neo4jConnection(settings)
    await conn.connect()

    try:
        await init_schema(conn)
        await seed_model(GraphStore(conn), build_static_model())
        logger.info("seed_complete")
    finally:
        await conn.close()


if __name__ == "__main__":
    setup_logging(log_level="INFO", log_format="console")
    asyncio.run(seed())
