"""Shared FastAPI dependency injection."""

from __future__ import annotations

from physgraph.graph_db.connection import Neo4jConnection
from physgraph.services.concept_service import ConceptService
from physgraph.services.overview_service import GraphOverviewService

_neo4j_conn: Neo4jConnection | None = None
_overview: GraphOverviewService | None = None
_concepts: ConceptService | None = None


def set_neo4j_conn(conn: Neo4jConnection) -> None:
    global _neo4j_conn
    _neo4j_conn = conn


def set_overview(overview: GraphOverviewService) -> None:
    global _overview
    _overview = overview


def set_concepts(concepts: ConceptService) -> None:
    global _concepts
    _concepts = concepts


def get_neo4j() -> Neo4jConnection:
    if _neo4j_conn is None:
        raise RuntimeError("Neo4j not initialized")
    return _neo4j_conn


def get_overview() -> GraphOverviewService:
    if _overview is None:
        raise RuntimeError("Graph overview not initialized")
    return _overview


def get_concepts() -> ConceptService:
    if _concepts is None:
        raise RuntimeError("Concept service not initialized")
    return _concepts
