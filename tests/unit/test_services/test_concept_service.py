"""Unit tests for concept-link syncing."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest

from physgraph.graph.models import ConceptNode, EdgeKind, SectionNode, TopicNode
from physgraph.graph.taxonomy import PROMOTION_FIELD_ID
from physgraph.services.concept_service import ContentSource, ConceptService, topic_slug


@pytest.fixture
def source() -> ContentSource:
    return ContentSource(id="c3", kind="topic", label="Hamiltonian Mechanics", group_key="classical", time_value=1833)


def _written_edges(mock_store):
    return list(mock_store.upsert_edges.call_args.args[0])


@pytest.mark.asyncio
async def test_existing_topic_is_linked(mock_store, source):
    mock_store.find_node_by_label = AsyncMock(
        return_value=TopicNode(id="c1", label="Newton's Laws of Motion", group_key="classical")
    )
    service = ConceptService(mock_store)

    target_ids = await service.sync_content_edges(source, "Builds on [[Newton's Laws of Motion]].")

    assert target_ids == ["c1"]
    edges = _written_edges(mock_store)
    assert [(e.source, e.target, e.kind) for e in edges] == [("c3", "c1", EdgeKind.MENTIONS)]
    # Only the source node itself is written
    assert mock_store.upsert_node.await_count == 1


@pytest.mark.asyncio
async def test_concept_is_promoted_to_topic(mock_store, source):
    mock_store.find_node_by_label = AsyncMock(
        return_value=ConceptNode(id="k1", label="phase space", description="Space of states")
    )
    service = ConceptService(mock_store)

    target_ids = await service.sync_content_edges(source, "[Phase Space](/concept/phase-space)")

    assert target_ids == ["k1"]
    promoted = mock_store.upsert_node.call_args_list[-1].args[0]
    assert isinstance(promoted, TopicNode)
    assert promoted.id == "k1"
    assert promoted.label == "Phase Space"
    assert promoted.group_key == PROMOTION_FIELD_ID
    assert promoted.slug == "phase-space"
    assert promoted.description == "Space of states"


@pytest.mark.asyncio
async def test_unknown_term_creates_topic(mock_store, source):
    service = ConceptService(mock_store)

    target_ids = await service.sync_content_edges(source, "Uses [[Symplectic Form]].")

    assert len(target_ids) == 1
    uuid.UUID(target_ids[0])
    created = mock_store.upsert_node.call_args_list[-1].args[0]
    assert isinstance(created, TopicNode)
    assert created.label == "Symplectic Form"
    assert created.group_key == PROMOTION_FIELD_ID
    assert created.time_value is None


@pytest.mark.asyncio
async def test_existing_mentions_replaced_even_without_terms(mock_store, source):
    service = ConceptService(mock_store)

    assert await service.sync_content_edges(source, "No links here.") == []

    mock_store.delete_edges_from.assert_awaited_once_with("c3", EdgeKind.MENTIONS)
    mock_store.upsert_edges.assert_not_called()
    written = mock_store.upsert_node.call_args.args[0]
    assert isinstance(written, TopicNode)
    assert written.time_value == 1833


@pytest.mark.asyncio
async def test_self_mentions_and_repeats_are_dropped(mock_store, source):
    nodes = {
        "Hamiltonian Mechanics": TopicNode(id="c3", label="Hamiltonian Mechanics"),
        "Energy": TopicNode(id="e1", label="Energy"),
        "energy": TopicNode(id="e1", label="Energy"),
    }
    mock_store.find_node_by_label = AsyncMock(side_effect=lambda term: nodes[term])
    service = ConceptService(mock_store)

    target_ids = await service.sync_content_edges(
        source, "[[Hamiltonian Mechanics]] [[Energy]] [[energy]]"
    )

    assert target_ids == ["e1"]


@pytest.mark.asyncio
async def test_section_source_written_as_section(mock_store):
    service = ConceptService(mock_store)
    section = ContentSource(id="s1", kind="section", label="Intro", topic_id="c3")

    await service.sync_content_edges(section, "")

    written = mock_store.upsert_node.call_args.args[0]
    assert isinstance(written, SectionNode)
    assert written.topic_id == "c3"


def test_topic_slug_fallback():
    assert topic_slug("Wave Function", "abcdef123456") == "wave-function"
    assert topic_slug("?", "abcdef123456") == "topic-abcdef12"
