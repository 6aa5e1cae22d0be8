"""N-body force simulation over abstract point masses.

One iteration applies, in this order: pairwise repulsion, spring attraction
along edges, an optional per-node constraint force, centering toward the
origin, then damping and integration. The order is fixed because it changes
the numeric result.

Pinned nodes never accumulate force and never move; the others react to them.
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable, Sequence

from pydantic import BaseModel

from physgraph.graph.models import Edge, EdgeKind, SimulationNode

# Returns the (fx, fy) force to add to a node's velocity, or None
Constraint = Callable[[SimulationNode], tuple[float, float] | None]

BACKBONE_KINDS = frozenset({EdgeKind.RUN, EdgeKind.HIERARCHY})


class PhysicsParams(BaseModel):
    repulsion: float = 40000.0
    repulsion_softening: float = 500.0
    spring_length: float = 80.0
    backbone_spring_length: float = 50.0
    spring_strength: float = 0.15
    sector_strength: float = 0.1
    sector_softening: float = 0.1
    damping: float = 0.9
    center_strength: float = 0.01
    min_distance_sq: float = 0.1
    jitter: float = 1.0
    seed: int = 42

    def rest_length(self, kind: EdgeKind) -> float:
        if kind in BACKBONE_KINDS:
            return self.backbone_spring_length
        return self.spring_length


def separate_coincident(
    nodes: Sequence[SimulationNode], rng: random.Random, jitter: float
) -> None:
    """Nudge unpinned nodes sitting exactly on a pinned node or an earlier node."""
    seen = {(node.x, node.y) for node in nodes if node.pinned}
    for node in nodes:
        if node.pinned:
            continue
        if (node.x, node.y) in seen:
            node.x += (rng.random() - 0.5) * jitter
            node.y += (rng.random() - 0.5) * jitter
        seen.add((node.x, node.y))


def simulate(
    nodes: list[SimulationNode],
    edges: Sequence[Edge],
    iterations: int,
    constraint: Constraint | None = None,
    params: PhysicsParams | None = None,
) -> list[SimulationNode]:
    """Run the simulation in place and return ``nodes``."""
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")
    params = params or PhysicsParams()

    separate_coincident(nodes, random.Random(params.seed), params.jitter)

    index = {node.id: node for node in nodes}
    springs = [
        (index[e.source], index[e.target], params.rest_length(e.kind))
        for e in edges
        if e.source in index and e.target in index
    ]
    count = len(nodes)

    for _ in range(iterations):
        # 1. Repulsion
        if params.repulsion:
            for i in range(count):
                a = nodes[i]
                for j in range(i + 1, count):
                    b = nodes[j]
                    dx = a.x - b.x
                    dy = a.y - b.y
                    dist_sq = dx * dx + dy * dy
                    if dist_sq == 0:
                        dist_sq = params.min_distance_sq
                    dist = math.sqrt(dist_sq)
                    force = params.repulsion / (dist_sq + params.repulsion_softening)
                    fx = dx / dist * force
                    fy = dy / dist * force
                    if not a.pinned:
                        a.vx += fx
                        a.vy += fy
                    if not b.pinned:
                        b.vx -= fx
                        b.vy -= fy

        # 2. Springs
        for source, target, rest in springs:
            dx = target.x - source.x
            dy = target.y - source.y
            dist = math.sqrt(dx * dx + dy * dy) or 1.0
            force = (dist - rest) * params.spring_strength
            fx = dx / dist * force
            fy = dy / dist * force
            if not source.pinned:
                source.vx += fx
                source.vy += fy
            if not target.pinned:
                target.vx -= fx
                target.vy -= fy

        # 3. Constraint
        if constraint is not None:
            for node in nodes:
                if node.pinned:
                    continue
                push = constraint(node)
                if push is not None:
                    node.vx += push[0]
                    node.vy += push[1]

        # 4. Centering, 5. damping and integration
        for node in nodes:
            if node.pinned:
                continue
            node.vx -= node.x * params.center_strength
            node.vy -= node.y * params.center_strength
            node.vx *= params.damping
            node.vy *= params.damping
            node.x += node.vx
            node.y += node.vy

    return nodes
