"""Custom exception hierarchy for the physics graph service."""

from __future__ import annotations


class PhysGraphError(Exception):
    """Base exception for all physgraph errors."""


class DataUnavailable(PhysGraphError):
    """The persisted graph store could not be read.

    Raised by the fetch/merge step and never retried internally; the caller
    decides when to try again.
    """


class GraphStoreError(PhysGraphError):
    """A write against the persisted graph store failed."""


class LayoutError(PhysGraphError):
    """A layout was requested for an unknown mode or before a model was loaded."""
