"""Graph API endpoints: laid-out graph, reload, export, image, concept links."""

from __future__ import annotations

import json
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from physgraph.api.dependencies import get_concepts, get_overview
from physgraph.api.graph_image import render_graph_image
from physgraph.api.v1.schemas.graph import (
    ContentEdgesRequest,
    ContentEdgesResponse,
    GraphLayoutResponse,
)
from physgraph.graph.models import LayoutMode
from physgraph.services.concept_service import ConceptService
from physgraph.services.overview_service import GraphOverviewService
from physgraph.utils.exceptions import DataUnavailable, GraphStoreError, LayoutError
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/graph", tags=["graph"])


async def _laid_out(overview: GraphOverviewService, mode: LayoutMode) -> GraphLayoutResponse:
    # Unloaded until a load or POST /graph/reload succeeds
    try:
        view = await overview.set_mode(mode)
    except LayoutError:
        raise HTTPException(status_code=503, detail="Graph not loaded; POST /api/v1/graph/reload to retry")
    return GraphLayoutResponse.from_view(view)


@router.get("", response_model=GraphLayoutResponse)
async def get_graph(
    mode: LayoutMode = LayoutMode.CHRONOLOGICAL,
    overview: GraphOverviewService = Depends(get_overview),
) -> GraphLayoutResponse:
    """Positioned nodes and the mode's edge list (D3-compatible)."""
    return await _laid_out(overview, mode)


@router.post("/reload", response_model=GraphLayoutResponse)
async def reload_graph(
    overview: GraphOverviewService = Depends(get_overview),
) -> GraphLayoutResponse:
    """Refetch the model from the store. A failure keeps the previous layout."""
    try:
        view = await overview.load()
    except DataUnavailable as exc:
        raise HTTPException(status_code=503, detail=f"Graph store unavailable: {exc}")
    return GraphLayoutResponse.from_view(view)


@router.get("/export")
async def export_graph(
    mode: LayoutMode = LayoutMode.CHRONOLOGICAL,
    format: Literal["json", "graphml"] = "json",
    overview: GraphOverviewService = Depends(get_overview),
) -> Response:
    """Export the laid-out graph as JSON or GraphML."""
    graph = await _laid_out(overview, mode)

    if format == "json":
        return Response(
            content=json.dumps(graph.model_dump(mode="json"), indent=2),
            media_type="application/json",
            headers={"Content-Disposition": f"attachment; filename=graph_{mode.value}.json"},
        )

    return Response(
        content=_to_graphml(graph),
        media_type="application/xml",
        headers={"Content-Disposition": f"attachment; filename=graph_{mode.value}.graphml"},
    )


@router.get("/image")
async def graph_image(
    mode: LayoutMode = LayoutMode.NETWORK,
    format: Literal["png", "jpeg", "jpg"] = "png",
    overview: GraphOverviewService = Depends(get_overview),
) -> Response:
    """Render the laid-out graph to an image at its computed positions."""
    graph = await _laid_out(overview, mode)
    content = render_graph_image(graph, format=format)
    media_type = "image/png" if format == "png" else "image/jpeg"
    return Response(content=content, media_type=media_type)


@router.post("/content-edges", response_model=ContentEdgesResponse)
async def sync_content_edges(
    request: ContentEdgesRequest,
    concepts: ConceptService = Depends(get_concepts),
) -> ContentEdgesResponse:
    """Rewrite the ``mentions`` edges of a topic/section from its body text."""
    try:
        target_ids = await concepts.sync_content_edges(request.source, request.content)
    except (DataUnavailable, GraphStoreError) as exc:
        logger.error("content_edges_sync_failed", source_id=request.source.id, error=str(exc))
        raise HTTPException(status_code=503, detail="Graph store unavailable")
    return ContentEdgesResponse(source_id=request.source.id, target_ids=target_ids)


def _to_graphml(graph: GraphLayoutResponse) -> str:
    """Convert a laid-out graph to GraphML, positions included."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<graphml xmlns="http://graphml.graphdrawing.org/xmlns">',
        '  <key id="label" for="node" attr.name="label" attr.type="string"/>',
        '  <key id="kind" for="node" attr.name="kind" attr.type="string"/>',
        '  <key id="x" for="node" attr.name="x" attr.type="double"/>',
        '  <key id="y" for="node" attr.name="y" attr.type="double"/>',
        '  <key id="type" for="edge" attr.name="type" attr.type="string"/>',
        '  <graph id="G" edgedefault="directed">',
    ]

    for node in graph.nodes:
        lines.append(f'    <node id="{_xml_escape(node.id)}">')
        lines.append(f'      <data key="label">{_xml_escape(node.label)}</data>')
        lines.append(f'      <data key="kind">{node.kind}</data>')
        lines.append(f'      <data key="x">{node.x:.3f}</data>')
        lines.append(f'      <data key="y">{node.y:.3f}</data>')
        lines.append("    </node>")

    for i, edge in enumerate(graph.edges):
        lines.append(
            f'    <edge id="e{i}" source="{_xml_escape(edge.source)}" target="{_xml_escape(edge.target)}">'
        )
        lines.append(f'      <data key="type">{edge.kind.value}</data>')
        lines.append("    </edge>")

    lines.append("  </graph>")
    lines.append("</graphml>")
    return "\n".join(lines)


def _xml_escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")
