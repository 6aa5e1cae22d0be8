"""Lay out the merged graph and write it to a JSON file."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from physgraph.api.v1.schemas.graph import GraphLayoutResponse
from physgraph.config import get_settings
from physgraph.graph.builder import GraphModelBuilder
from physgraph.graph.models import LayoutMode
from physgraph.graph_db.connection import Neo4jConnection
from physgraph.services.graph_store import GraphStore
from physgraph.services.overview_service import GraphOverviewService
from physgraph.utils.exceptions import DataUnavailable
from physgraph.utils.logging import setup_logging


async def main(mode: LayoutMode, filename: str, static_only: bool) -> None:
    setup_logging(log_level="INFO", log_format="console")
    settings = get_settings()

    conn = Neo4jConnection(settings)
    builder = GraphModelBuilder(GraphStore(conn))
    overview = GraphOverviewService(builder, settings)

    try:
        if static_only:
            await overview.use_model(builder.build_static_model())
        else:
            await conn.connect()
            try:
                await overview.load()
            except DataUnavailable as exc:
                print(f"Graph store unavailable: {exc}")
                sys.exit(1)
        view = await overview.set_mode(mode)
    finally:
        await conn.close()

    output = GraphLayoutResponse.from_view(view).model_dump(mode="json")
    with open(filename, "w") as f:
        json.dump(output, f, indent=2)
    print(f"Graph exported to {filename}")
    print(f"  Nodes: {output['node_count']}")
    print(f"  Edges: {output['edge_count']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--mode", choices=[m.value for m in LayoutMode], default=LayoutMode.NETWORK.value)
    parser.add_argument("--output", default="graph_export.json")
    parser.add_argument("--static", action="store_true", help="Skip the store and lay out the taxonomy only")
    args = parser.parse_args()
    asyncio.run(main(LayoutMode(args.mode), args.output, args.static))
