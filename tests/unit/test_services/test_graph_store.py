"""Unit tests for the Neo4j-backed graph store."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from neo4j.exceptions import ServiceUnavailable

from physgraph.graph.models import ConceptNode, Edge, EdgeKind, TopicNode
from physgraph.services.graph_store import GraphStore
from physgraph.utils.exceptions import DataUnavailable, GraphStoreError


@pytest.mark.asyncio
async def test_fetch_nodes_empty(mock_neo4j):
    store = GraphStore(mock_neo4j)
    assert await store.fetch_nodes() == []


@pytest.mark.asyncio
async def test_fetch_nodes_skips_unknown_kinds(mock_neo4j):
    mock_neo4j.execute_read = AsyncMock(return_value=[
        {"node": {"id": "c1", "kind": "topic", "label": "Newton", "time_value": "1687", "group_key": "classical"}},
        {"node": {"id": "x", "kind": "asteroid", "label": "?"}},
        {"node": {"id": "k1", "kind": "concept", "label": "Energy"}},
    ])
    store = GraphStore(mock_neo4j)

    nodes = await store.fetch_nodes()

    assert [n.id for n in nodes] == ["c1", "k1"]
    assert isinstance(nodes[0], TopicNode)
    assert nodes[0].time_value == 1687.0


@pytest.mark.asyncio
async def test_fetch_nodes_skips_malformed_record(mock_neo4j):
    mock_neo4j.execute_read = AsyncMock(return_value=[
        {"node": {"id": "c1", "kind": "topic", "label": "Newton", "pinned_x": "n/a", "pinned_y": 0}},
        {"node": {"id": "c2", "kind": "topic", "label": "Lagrange", "time_value": "1788s"}},
    ])
    store = GraphStore(mock_neo4j)

    nodes = await store.fetch_nodes()

    assert [n.id for n in nodes] == ["c2"]
    assert nodes[0].time_value == 1788.0


@pytest.mark.asyncio
async def test_fetch_edges(mock_neo4j):
    mock_neo4j.execute_read = AsyncMock(return_value=[
        {"source": "c1", "target": "k1", "kind": "mentions"},
        {"source": "c1", "target": "k2", "kind": "related"},
    ])
    store = GraphStore(mock_neo4j)

    assert await store.fetch_edges() == [Edge(source="c1", target="k1", kind=EdgeKind.MENTIONS)]


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["fetch_nodes", "fetch_edges"])
async def test_unreachable_store_raises_data_unavailable(mock_neo4j, method):
    mock_neo4j.execute_read = AsyncMock(side_effect=ServiceUnavailable("connection refused"))
    store = GraphStore(mock_neo4j)

    with pytest.raises(DataUnavailable):
        await getattr(store, method)()


@pytest.mark.asyncio
async def test_unconnected_driver_raises_data_unavailable(mock_neo4j):
    mock_neo4j.execute_read = AsyncMock(side_effect=RuntimeError("Neo4j not connected"))
    store = GraphStore(mock_neo4j)

    with pytest.raises(DataUnavailable):
        await store.fetch_nodes()


@pytest.mark.asyncio
async def test_find_node_by_label(mock_neo4j):
    mock_neo4j.execute_read = AsyncMock(return_value=[{"node": {"id": "k1", "kind": "concept", "label": "Energy"}}])
    store = GraphStore(mock_neo4j)

    node = await store.find_node_by_label("energy")

    assert isinstance(node, ConceptNode)
    assert mock_neo4j.execute_read.call_args.kwargs["label"] == "energy"


@pytest.mark.asyncio
async def test_upsert_node_flattens_properties(mock_neo4j):
    store = GraphStore(mock_neo4j)
    await store.upsert_node(TopicNode(id="c1", label="Newton", time_value=1687))

    kwargs = mock_neo4j.execute_write.call_args.kwargs
    assert kwargs["id"] == "c1"
    assert kwargs["properties"]["kind"] == "topic"
    assert kwargs["properties"]["time_value"] == 1687


@pytest.mark.asyncio
async def test_upsert_edges_dedupes_and_drops_self_loops(mock_neo4j):
    store = GraphStore(mock_neo4j)
    edges = [
        Edge(source="a", target="b", kind=EdgeKind.MENTIONS),
        Edge(source="a", target="b", kind=EdgeKind.MENTIONS),
        Edge(source="a", target="a", kind=EdgeKind.MENTIONS),
        Edge(source="a", target="b", kind=EdgeKind.TEMPORAL),
    ]

    written = await store.upsert_edges(edges)

    assert written == 2
    payload = mock_neo4j.execute_write.call_args.kwargs["edges"]
    assert {"source": "a", "target": "b", "kind": "mentions"} in payload
    assert len(payload) == 2


@pytest.mark.asyncio
async def test_upsert_edges_nothing_to_write(mock_neo4j):
    store = GraphStore(mock_neo4j)
    assert await store.upsert_edges([]) == 0
    mock_neo4j.execute_write.assert_not_called()


@pytest.mark.asyncio
async def test_write_failure_raises_graph_store_error(mock_neo4j):
    mock_neo4j.execute_write = AsyncMock(side_effect=ServiceUnavailable("down"))
    store = GraphStore(mock_neo4j)

    with pytest.raises(GraphStoreError):
        await store.upsert_node(ConceptNode(id="k1", label="Energy"))
    with pytest.raises(GraphStoreError):
        await store.delete_edges_from("c1", EdgeKind.MENTIONS)
