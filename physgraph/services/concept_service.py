"""Turns concept links in topic/section text into persisted ``mentions`` edges."""

from __future__ import annotations

import uuid
from typing import Literal

from pydantic import BaseModel

from physgraph.graph.models import ConceptNode, Edge, EdgeKind, Node, SectionNode, TopicNode
from physgraph.graph.taxonomy import PROMOTION_FIELD_ID
from physgraph.services.graph_store import GraphStore
from physgraph.utils.logging import get_logger
from physgraph.utils.text_processing import extract_concept_terms, slugify

logger = get_logger(__name__)


class ContentSource(BaseModel):
    """The topic or section whose body text is being scanned."""

    id: str
    kind: Literal["topic", "section"]
    label: str
    group_key: str | None = None
    time_value: float | None = None
    slug: str | None = None
    topic_id: str | None = None

    def to_node(self) -> Node:
        if self.kind == "topic":
            return TopicNode(
                id=self.id,
                label=self.label,
                group_key=self.group_key,
                time_value=self.time_value,
                slug=self.slug,
            )
        return SectionNode(id=self.id, label=self.label, group_key=self.group_key, topic_id=self.topic_id)


def topic_slug(term: str, node_id: str) -> str:
    slug = slugify(term)
    if len(slug) < 2:
        slug = f"topic-{node_id[:8]}"
    return slug


class ConceptService:
    """Keeps the ``mentions`` edges of one source in step with its text."""

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    async def sync_content_edges(self, source: ContentSource, content: str) -> list[str]:
        """Replace the source's ``mentions`` edges with the links in ``content``.

        Terms resolve to an existing node by label. A matching concept is
        promoted to a topic, and an unmatched term becomes a new topic; both
        land in the mathematical-physics field.

        Returns:
            Ids of the mentioned nodes, in first-mention order.
        """
        terms = extract_concept_terms(content)
        logger.info("content_terms_found", source_id=source.id, terms=len(terms))

        await self._store.upsert_node(source.to_node())
        await self._store.delete_edges_from(source.id, EdgeKind.MENTIONS)
        if not terms:
            return []

        target_ids: list[str] = []
        for term in terms:
            node = await self._resolve(term)
            if node.id != source.id and node.id not in target_ids:
                target_ids.append(node.id)

        await self._store.upsert_edges(
            Edge(source=source.id, target=target_id, kind=EdgeKind.MENTIONS)
            for target_id in target_ids
        )
        return target_ids

    async def _resolve(self, term: str) -> Node:
        existing = await self._store.find_node_by_label(term)
        if existing is not None and not isinstance(existing, ConceptNode):
            return existing

        if isinstance(existing, ConceptNode):
            node = TopicNode(
                id=existing.id,
                label=term,
                description=existing.description or "Auto-promoted concept.",
                group_key=PROMOTION_FIELD_ID,
                slug=topic_slug(term, existing.id),
            )
            logger.info("concept_promoted", term=term, node_id=node.id)
        else:
            node_id = str(uuid.uuid4())
            node = TopicNode(
                id=node_id,
                label=term,
                description="Auto-generated from concept link.",
                group_key=PROMOTION_FIELD_ID,
                slug=topic_slug(term, node_id),
            )
            logger.info("concept_topic_created", term=term, node_id=node.id)

        await self._store.upsert_node(node)
        return node
