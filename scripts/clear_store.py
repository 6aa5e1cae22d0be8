"""Delete every persisted graph node and edge from Neo4j."""

from __future__ import annotations

import asyncio

from physgraph.config import get_settings
from physgraph.graph_db.connection import Neo4jConnection
from physgraph.graph_db.queries import DELETE_ALL
from physgraph.utils.logging import setup_logging


async def main() -> None:
    setup_logging(log_level="INFO", log_format="console")

    settings = get_settings()
    conn = Neo4jConnection(settings)
    await conn.connect()

    try:
        await conn.execute_write(DELETE_ALL)
        print("All graph nodes and edges deleted from Neo4j.")
    finally:
        await conn.close()


if __name__ == "__main__":
    asyncio.run(main())
