"""
Visualization Contracts

Read-only derivation of display overrides and renderable records.
"""

from .overrides import (
    NodeOverride, EdgeOverride, VisualOverrides, EMPTY_OVERRIDES,
    NodeDisplay, EdgeDisplay, compute_visual_overrides, resolve_active_node,
    node_display, edge_display,
    MUTED_NODE_COLOR, ACTIVE_EDGE_COLOR, INACTIVE_EDGE_COLOR,
)

__all__ = [
    'NodeOverride', 'EdgeOverride', 'VisualOverrides', 'EMPTY_OVERRIDES',
    'NodeDisplay', 'EdgeDisplay', 'compute_visual_overrides', 'resolve_active_node',
    'node_display', 'edge_display',
    'MUTED_NODE_COLOR', 'ACTIVE_EDGE_COLOR', 'INACTIVE_EDGE_COLOR',
]
