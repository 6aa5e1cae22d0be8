"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from physgraph.graph.models import (
    ConceptNode,
    Edge,
    EdgeKind,
    FieldNode,
    GraphModel,
    RootNode,
    TopicNode,
)


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Set required environment variables for tests."""
    monkeypatch.setenv("NEO4J_URI", "bolt://localhost:7687")
    monkeypatch.setenv("NEO4J_USER", "neo4j")
    monkeypatch.setenv("NEO4J_PASSWORD", "test")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("NETWORK_ITERATIONS", "30")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def settings():
    from physgraph.config import Settings

    return Settings(NETWORK_ITERATIONS=30, CANVAS_WIDTH=2000, LAYOUT_SEED=42)


@pytest.fixture
def mock_neo4j():
    conn = AsyncMock()
    conn.execute_read = AsyncMock(return_value=[])
    conn.execute_write = AsyncMock(return_value=[])
    return conn


@pytest.fixture
def mock_store():
    """GraphStore stand-in with an empty persisted graph."""
    store = AsyncMock()
    store.fetch_nodes = AsyncMock(return_value=[])
    store.fetch_edges = AsyncMock(return_value=[])
    store.find_node_by_label = AsyncMock(return_value=None)
    store.upsert_node = AsyncMock()
    store.upsert_edges = AsyncMock(return_value=0)
    store.delete_edges_from = AsyncMock()
    return store


@pytest.fixture
def small_model() -> GraphModel:
    """Root, two fields, four timed topics and one mentioned concept."""
    nodes = [
        RootNode(id="root", label="PHYSICS"),
        FieldNode(id="classical", label="Classical Mechanics"),
        FieldNode(id="quantum", label="Quantum Mechanics"),
        TopicNode(id="c1", label="Newton", group_key="classical", time_value=1687),
        TopicNode(id="c2", label="Lagrange", group_key="classical", time_value=1788),
        TopicNode(id="q1", label="Planck", group_key="quantum", time_value=1900),
        TopicNode(id="q2", label="Bohr", group_key="quantum", time_value=1913),
        ConceptNode(id="k1", label="Energy"),
    ]
    edges = [
        Edge(source="root", target="classical", kind=EdgeKind.HIERARCHY),
        Edge(source="root", target="quantum", kind=EdgeKind.HIERARCHY),
        Edge(source="classical", target="c1", kind=EdgeKind.HIERARCHY),
        Edge(source="classical", target="c2", kind=EdgeKind.HIERARCHY),
        Edge(source="quantum", target="q1", kind=EdgeKind.HIERARCHY),
        Edge(source="quantum", target="q2", kind=EdgeKind.HIERARCHY),
        Edge(source="c1", target="c2", kind=EdgeKind.TEMPORAL),
        Edge(source="q1", target="q2", kind=EdgeKind.TEMPORAL),
        Edge(source="c2", target="q1", kind=EdgeKind.TEMPORAL),
        Edge(source="q1", target="k1", kind=EdgeKind.MENTIONS),
    ]
    return GraphModel(nodes=nodes, edges=edges)
