"""Initialize the Neo4j schema and seed the static taxonomy into the store."""

from __future__ import annotations

import asyncio

from physgraph.graph_db.seed import seed
from physgraph.utils.logging import setup_logging

if __name__ == "__main__":
    setup_logging(log_level="INFO", log_format="console")
    asyncio.run(seed())
