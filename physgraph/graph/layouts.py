"""Chronological lane layout and sector-constrained network layout."""

from __future__ import annotations

import math
import random
from collections.abc import Mapping, Sequence

from physgraph.graph.backbone import classify_for_mode
from physgraph.graph.models import (
    EdgeKind,
    FieldNode,
    GraphModel,
    LayoutMode,
    Node,
    Point,
    PositionedNode,
    RootNode,
    SimulationNode,
    TopicNode,
)
from physgraph.graph.simulation import Constraint, PhysicsParams, simulate
from physgraph.graph.taxonomy import DEFAULT_TAXONOMY
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)

# ── Chronological constants ──────────────────────────────────────────
MIN_TIME = 1600
MAX_TIME = 2030
LANE_HEIGHT = 150
ROOT_X = 50
FIELD_X = 220
TIMELINE_X0 = 400
RIGHT_MARGIN = 50
STACK_STEP = 40
CHILD_ROWS_PER_COLUMN = 6
CHILD_X0 = 140
CHILD_COLUMN_WIDTH = 120
CHILD_ROW_HEIGHT = 35

# ── Network constants ────────────────────────────────────────────────
NETWORK_ITERATIONS = 500
FIELD_RADIUS = 300
TOPIC_RADIUS_MIN = 350
TOPIC_RADIUS_SPAN = 600
TIME_SPAN = 400
CHILD_RADIUS_MIN = 400
CHILD_RADIUS_SPAN = 200
DEFAULT_RADIUS_MIN = 200
DEFAULT_RADIUS_SPAN = 200
INIT_JITTER = 50
UNSECTORED_SPREAD = 1000


def group_order(model: GraphModel, declared: Sequence[str] | None = None) -> list[str]:
    """Declared groups first, then any other field ids in the model, sorted."""
    order = list(DEFAULT_TAXONOMY.group_order if declared is None else declared)
    known = set(order)
    extra = sorted(
        node.id for node in model.nodes
        if isinstance(node, FieldNode) and node.id not in known
    )
    return order + extra


def sector_angles(groups: Sequence[str]) -> dict[str, float]:
    """Evenly divide the circle among ``groups``, first group at angle 0."""
    if not groups:
        return {}
    step = 2 * math.pi / len(groups)
    return {group: index * step for index, group in enumerate(groups)}


def stack_offset(count: int, step: float = STACK_STEP) -> float:
    """Vertical offset for the ``count``-th item in a bucket: 0, +k, -k, +2k, -2k, ..."""
    if count == 0:
        return 0.0
    direction = 1 if count % 2 else -1
    return direction * math.ceil(count / 2) * step


# ── Chronological ────────────────────────────────────────────────────


def layout_chronological(
    model: GraphModel,
    canvas_width: float = 2000,
    groups: Sequence[str] | None = None,
) -> list[PositionedNode]:
    """Lane-per-field timeline. Pure and reproducible."""
    lanes = {group: i * LANE_HEIGHT for i, group in enumerate(group_order(model, groups))}
    px_per_year = (canvas_width - TIMELINE_X0 - RIGHT_MARGIN) / (MAX_TIME - MIN_TIME)
    unknown_x = canvas_width - RIGHT_MARGIN

    positions: dict[str, tuple[float, float]] = {}
    bucket_counts: dict[tuple[str | None, float | None], int] = {}

    for node in model.nodes:
        if isinstance(node, RootNode):
            positions[node.id] = (ROOT_X, (len(lanes) * LANE_HEIGHT) / 2 - LANE_HEIGHT / 2)
        elif isinstance(node, FieldNode):
            positions[node.id] = (FIELD_X, lanes.get(node.id, 0))
        elif isinstance(node, TopicNode):
            lane_y = lanes.get(node.group_key or "", 0)
            bucket = (node.group_key, node.time_value)
            count = bucket_counts.get(bucket, 0)
            bucket_counts[bucket] = count + 1
            if node.time_value is not None:
                x = TIMELINE_X0 + (node.time_value - MIN_TIME) * px_per_year
            else:
                x = unknown_x
            positions[node.id] = (x, lane_y + stack_offset(count))

    _place_children(model, positions)

    # Children with no positioned parent stay at the origin
    result: list[PositionedNode] = []
    for node in model.nodes:
        x, y = positions.get(node.id, (0.0, 0.0))
        result.append(PositionedNode(node=node, x=x, y=y))
    return result


def _place_children(model: GraphModel, positions: dict[str, tuple[float, float]]) -> None:
    """Grid concepts and sections beside the first positioned parent that links them."""
    index = model.node_index
    links = [
        e for e in model.edges
        if e.kind is EdgeKind.MENTIONS
        or (e.kind is EdgeKind.HIERARCHY and index.get(e.source) is not None and index[e.source].kind == "topic")
    ]
    links.sort(key=lambda e: e.target)

    child_counts: dict[str, int] = {}
    for edge in links:
        target = index.get(edge.target)
        if target is None or target.kind not in ("concept", "section"):
            continue
        if edge.target in positions or edge.source not in positions:
            continue
        slot = child_counts.get(edge.source, 0)
        child_counts[edge.source] = slot + 1
        column, row = divmod(slot, CHILD_ROWS_PER_COLUMN)
        parent_x, parent_y = positions[edge.source]
        positions[edge.target] = (
            parent_x + CHILD_X0 + column * CHILD_COLUMN_WIDTH,
            parent_y + (row - (CHILD_ROWS_PER_COLUMN - 1) / 2) * CHILD_ROW_HEIGHT,
        )


# ── Network ──────────────────────────────────────────────────────────


def sector_constraint(targets: Mapping[str, float], params: PhysicsParams) -> Constraint:
    """Tangential push toward each node's target angle around the origin.

    The push grows with the angular deviation and with the node's radius.
    """

    def push(node: SimulationNode) -> tuple[float, float] | None:
        target = targets.get(node.id)
        if target is None:
            return None
        diff = target - math.atan2(node.y, node.x)
        diff = (diff + math.pi) % (2 * math.pi) - math.pi
        radius = math.hypot(node.x, node.y) or 1.0
        restore = diff * params.sector_strength * radius * params.sector_softening
        # (-y, x) is the counter-clockwise tangent
        return (-node.y / radius * restore, node.x / radius * restore)

    return push


def _initial_position(
    node: Node,
    angles: Mapping[str, float],
    rng: random.Random,
) -> tuple[float, float, bool]:
    if node.pinned is not None:
        return node.pinned.x, node.pinned.y, True
    if isinstance(node, RootNode):
        return 0.0, 0.0, True
    if isinstance(node, FieldNode) and node.id in angles:
        angle = angles[node.id]
        return math.cos(angle) * FIELD_RADIUS, math.sin(angle) * FIELD_RADIUS, True

    angle = angles.get(node.group_key or "")
    if angle is None:
        return (
            (rng.random() - 0.5) * UNSECTORED_SPREAD,
            (rng.random() - 0.5) * UNSECTORED_SPREAD,
            False,
        )

    if isinstance(node, TopicNode):
        if node.time_value is not None:
            radius = TOPIC_RADIUS_MIN + (node.time_value - MIN_TIME) / TIME_SPAN * TOPIC_RADIUS_SPAN
        else:
            radius = DEFAULT_RADIUS_MIN + rng.random() * DEFAULT_RADIUS_SPAN
    else:
        radius = CHILD_RADIUS_MIN + rng.random() * CHILD_RADIUS_SPAN
    jitter = (rng.random() - 0.5) * INIT_JITTER
    return (
        math.cos(angle) * radius - math.sin(angle) * jitter,
        math.sin(angle) * radius + math.cos(angle) * jitter,
        False,
    )


def layout_network(
    model: GraphModel,
    previous_positions: Mapping[str, Point] | None = None,
    params: PhysicsParams | None = None,
    iterations: int = NETWORK_ITERATIONS,
    groups: Sequence[str] | None = None,
) -> list[PositionedNode]:
    """Sector-constrained force layout.

    Root is pinned at the origin and fields on a fixed ring. Everything else
    starts along its group's ray (or at its ``previous_positions`` entry)
    and is settled by the simulation.
    """
    if not model.nodes:
        return []
    params = params or PhysicsParams()
    previous_positions = previous_positions or {}
    angles = sector_angles(group_order(model, groups))
    rng = random.Random(params.seed)

    sim_nodes: list[SimulationNode] = []
    targets: dict[str, float] = {}
    warm = 0
    for node in model.nodes:
        x, y, pinned = _initial_position(node, angles, rng)
        previous = previous_positions.get(node.id)
        if previous is not None and not pinned:
            x, y = previous.x, previous.y
            warm += 1
        sim_nodes.append(SimulationNode(id=node.id, x=x, y=y, pinned=pinned))
        if node.group_key in angles:
            targets[node.id] = angles[node.group_key]

    edges = classify_for_mode(model, LayoutMode.NETWORK)
    simulate(sim_nodes, edges, iterations, sector_constraint(targets, params), params)
    logger.debug(
        "network_layout_computed",
        nodes=len(sim_nodes),
        edges=len(edges),
        warm_started=warm,
        iterations=iterations,
    )
    return [
        PositionedNode(node=node, x=sim.x, y=sim.y)
        for node, sim in zip(model.nodes, sim_nodes)
    ]
