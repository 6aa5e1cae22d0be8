"""Single-slot cache for the last computed network layout."""

from __future__ import annotations

from physgraph.graph.models import PositionedNode


class LayoutCache:
    """Holds one layout keyed by a model fingerprint.

    A lookup with any other fingerprint misses and drops the stored entry.
    """

    def __init__(self) -> None:
        self._fingerprint: str | None = None
        self._nodes: list[PositionedNode] | None = None

    @property
    def fingerprint(self) -> str | None:
        return self._fingerprint

    def get(self, fingerprint: str) -> list[PositionedNode] | None:
        if self._fingerprint != fingerprint:
            self.invalidate()
            return None
        return self._nodes

    def put(self, fingerprint: str, nodes: list[PositionedNode]) -> None:
        self._fingerprint = fingerprint
        self._nodes = list(nodes)

    def invalidate(self) -> None:
        self._fingerprint = None
        self._nodes = None
