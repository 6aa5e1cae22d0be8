"""Render a laid-out graph to PNG/JPEG image bytes."""

from __future__ import annotations

import io
from typing import Literal

from physgraph.api.v1.schemas.graph import GraphLayoutResponse

NODE_COLORS = {
    "root": "#1f1b1f",
    "field": "#c15b4d",
    "topic": "#4a90d9",
    "concept": "#d4b483",
    "section": "#8fa88f",
}
NODE_SIZES = {"root": 1400, "field": 1000, "topic": 600, "concept": 300, "section": 300}


def render_graph_image(
    graph: GraphLayoutResponse,
    format: Literal["png", "jpeg", "jpg"] = "png",
    dpi: int = 100,
    figsize: tuple[float, float] = (14, 10),
) -> bytes:
    """Draw the graph with NetworkX + Matplotlib at the layout's positions.

    Args:
        graph: Laid-out graph; node ``x``/``y`` are used as-is.
        format: Output format: "png", "jpeg", or "jpg".
        dpi: Dots per inch for the image.
        figsize: Figure size (width, height) in inches.

    Returns:
        Image bytes (PNG or JPEG).
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    import networkx as nx

    if not graph.nodes:
        return _empty_image_bytes(format, dpi)

    G = nx.DiGraph()
    for node in graph.nodes:
        G.add_node(node.id, kind=node.kind)
    for edge in graph.edges:
        G.add_edge(edge.source, edge.target, kind=edge.kind.value)

    # Screen coordinates grow downward, matplotlib's upward
    pos = {node.id: (node.x, -node.y) for node in graph.nodes}

    labels = {}
    for node in graph.nodes:
        name = node.label
        if len(name) > 20:
            name = name[:17] + "..."
        labels[node.id] = name

    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")

    nx.draw_networkx_nodes(
        G,
        pos,
        node_color=[NODE_COLORS.get(G.nodes[n]["kind"], "#888888") for n in G.nodes],
        node_size=[NODE_SIZES.get(G.nodes[n]["kind"], 300) for n in G.nodes],
        alpha=0.9,
        ax=ax,
    )
    nx.draw_networkx_edges(
        G,
        pos,
        edge_color="#666666",
        arrows=True,
        arrowsize=10,
        ax=ax,
    )
    nx.draw_networkx_labels(G, pos, labels=labels, font_size=7, font_color="black", ax=ax)

    ax.axis("off")
    plt.tight_layout(pad=0.5)
    return _to_bytes(fig, format, dpi)


def _empty_image_bytes(format: Literal["png", "jpeg", "jpg"], dpi: int) -> bytes:
    """Return a small placeholder image when the graph has no nodes."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(4, 2), dpi=dpi)
    fig.patch.set_facecolor("white")
    ax.text(0.5, 0.5, "No nodes in graph", ha="center", va="center", fontsize=12)
    ax.axis("off")
    return _to_bytes(fig, format, dpi)


def _to_bytes(fig, format: str, dpi: int) -> bytes:
    import matplotlib.pyplot as plt

    buf = io.BytesIO()
    save_fmt = "jpg" if format in ("jpeg", "jpg") else "png"
    fig.savefig(buf, format=save_fmt, bbox_inches="tight", facecolor="white", dpi=dpi)
    plt.close(fig)
    buf.seek(0)
    return buf.read()
