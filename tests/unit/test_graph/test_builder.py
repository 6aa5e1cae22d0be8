"""Unit tests for the static model and the persisted-data merge."""

from __future__ import annotations

from collections import Counter
from unittest.mock import AsyncMock

import pytest

from physgraph.graph.builder import ROOT_ID, GraphModelBuilder, build_static_model, merge_models
from physgraph.graph.models import ConceptNode, Edge, EdgeKind, FieldNode, TopicNode
from physgraph.graph.taxonomy import DEFAULT_TAXONOMY, Taxonomy, TaxonomyField, TaxonomyTopic
from physgraph.utils.exceptions import DataUnavailable


def test_static_model_shape():
    model = build_static_model()

    kinds = Counter(node.kind for node in model.nodes)
    assert kinds == {"root": 1, "field": len(DEFAULT_TAXONOMY.fields), "topic": len(DEFAULT_TAXONOMY.topics)}
    assert model.nodes[0].id == ROOT_ID

    ids = [node.id for node in model.nodes]
    assert len(ids) == len(set(ids))


def test_static_model_edges():
    model = build_static_model()
    keys = {edge.key for edge in model.edges}

    assert (ROOT_ID, "quantum", EdgeKind.HIERARCHY) in keys
    assert ("classical", "c1", EdgeKind.HIERARCHY) in keys
    # Classical topics chained by year: Kepler 1609, Galileo 1638, Newton 1687, ...
    temporal = [(e.source, e.target) for e in model.edges if e.kind is EdgeKind.TEMPORAL]
    assert ("c4", "c5") in temporal
    assert ("c5", "c1") in temporal
    assert ("c1", "c2") in temporal


def test_static_model_is_reproducible():
    assert build_static_model() == build_static_model()


def test_duplicate_taxonomy_ids_are_skipped():
    taxonomy = Taxonomy(
        fields=[TaxonomyField(id="optics", slug="optics", name="Optics")],
        topics=[
            TaxonomyTopic(id="o1", field_id="optics", year="1704", title="Opticks", slug="opticks"),
            TaxonomyTopic(id="o1", field_id="optics", year="1801", title="Young", slug="young"),
            TaxonomyTopic(id="o2", field_id="optics", year="unknown", title="Lens", slug="lens"),
        ],
    )

    model = build_static_model(taxonomy)

    assert [n.id for n in model.nodes] == [ROOT_ID, "optics", "o1", "o2"]
    topic = model.node_index["o1"]
    assert isinstance(topic, TopicNode)
    assert topic.label == "Opticks"
    assert model.node_index["o2"].time_value is None


def test_merge_overwrites_static_node_in_place():
    static = build_static_model()
    edited = FieldNode(id="quantum", label="Quantum (edited)")

    merged = merge_models(static, [edited], [])

    matches = [n for n in merged.nodes if n.id == "quantum"]
    assert len(matches) == 1
    assert matches[0].label == "Quantum (edited)"
    assert [n.id for n in merged.nodes] == [n.id for n in static.nodes]


def test_merge_appends_new_nodes_and_unions_edges():
    static = build_static_model()
    concept = ConceptNode(id="k1", label="Entropy")
    edges = [
        Edge(source="s1", target="k1", kind=EdgeKind.MENTIONS),
        Edge(source="s1", target="k1", kind=EdgeKind.MENTIONS),
        Edge(source=ROOT_ID, target="quantum", kind=EdgeKind.HIERARCHY),
        Edge(source="s1", target="k1", kind=EdgeKind.HIERARCHY),
    ]

    merged = merge_models(static, [concept], edges)

    assert merged.nodes[-1] == concept
    assert len(merged.edges) == len(static.edges) + 2
    assert len({e.key for e in merged.edges}) == len(merged.edges)


@pytest.mark.asyncio
async def test_fetch_merged_model(mock_store):
    mock_store.fetch_nodes = AsyncMock(return_value=[ConceptNode(id="k1", label="Entropy")])
    mock_store.fetch_edges = AsyncMock(return_value=[Edge(source="s1", target="k1", kind=EdgeKind.MENTIONS)])
    builder = GraphModelBuilder(mock_store)

    model = await builder.fetch_merged_model()

    assert "k1" in model.node_index
    assert ("s1", "k1", EdgeKind.MENTIONS) in {e.key for e in model.edges}
    mock_store.fetch_nodes.assert_awaited_once()
    mock_store.fetch_edges.assert_awaited_once()


@pytest.mark.asyncio
async def test_fetch_merged_model_propagates_store_failure(mock_store):
    mock_store.fetch_nodes = AsyncMock(side_effect=DataUnavailable("down"))
    builder = GraphModelBuilder(mock_store)

    with pytest.raises(DataUnavailable):
        await builder.fetch_merged_model()
