"""
Error Hierarchy

STRUCTURAL errors are raised at construction time and propagate to the
caller. They mean the upstream data broke the graph contract.

LAYOUT errors are raised inside the physics step and are always caught
by the layout runner. They never reach the interactive session.

Degraded data (missing clusters, empty edge lists, all-zero metrics) and
stale node references are not errors at all.
"""

from __future__ import annotations


class GraphError(Exception):
    """Base class for every error raised by the graph engine."""


# =============================================================================
# STRUCTURAL ERRORS (propagate)
# =============================================================================

class GraphStructureError(GraphError):
    """The graph would stop being a simple directed graph."""


class DuplicateNodeError(GraphStructureError):
    def __init__(self, node_id: str):
        super().__init__(f"Node already exists: {node_id}")
        self.node_id = node_id


class DuplicateEdgeError(GraphStructureError):
    def __init__(self, source: str, target: str):
        super().__init__(f"Edge already exists: {source} -> {target}")
        self.source = source
        self.target = target


class UnknownNodeError(GraphStructureError):
    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


# =============================================================================
# LAYOUT ERRORS (absorbed by the runner)
# =============================================================================

class LayoutComputationError(GraphError):
    """A physics step produced non-finite positions."""
