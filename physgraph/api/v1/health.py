"""Health and readiness check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from physgraph.api.dependencies import get_neo4j, get_overview
from physgraph.graph_db.connection import Neo4jConnection
from physgraph.services.overview_service import GraphOverviewService

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(
    neo4j: Neo4jConnection = Depends(get_neo4j),
    overview: GraphOverviewService = Depends(get_overview),
) -> dict:
    try:
        ok = await neo4j.health_check()
    except Exception as exc:
        return {"status": "not_ready", "error": str(exc), "layout": overview.state.value}
    return {"status": "ready" if ok else "degraded", "neo4j": ok, "layout": overview.state.value}
