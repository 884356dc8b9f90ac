"""
Graph View State

Three slices:
- controls: display settings that can trigger a rebuild or re-encode
- interaction: hover, selection, search text, community focus
- graph_ready: whether a built graph is available to render

A transition replaces only the slice it touches, so a renderer can detect
change with an identity check per slice.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import FrozenSet, Optional

from flowgraph.contracts.base import Metric, ScaleType


@dataclass(frozen=True)
class ControlState:
    """User-adjustable display controls."""
    metric: Metric = Metric.VOLUME
    scale: ScaleType = ScaleType.LOG
    min_edge_weight: float = 0.0
    max_nodes: int = 1000
    hide_isolated: bool = True
    layout_running: bool = False

    def __post_init__(self):
        # accept wire strings for the enum fields
        object.__setattr__(self, "metric", Metric.parse(self.metric))
        object.__setattr__(self, "scale", ScaleType.parse(self.scale))
        if self.min_edge_weight < 0:
            raise ValueError(f"min_edge_weight must be >= 0, got {self.min_edge_weight}")
        if self.max_nodes < 1:
            raise ValueError(f"max_nodes must be >= 1, got {self.max_nodes}")

    @classmethod
    def field_names(cls) -> FrozenSet[str]:
        return frozenset(f.name for f in fields(cls))


@dataclass(frozen=True)
class InteractionState:
    """Transient pointer and search state."""
    selected_node: Optional[str] = None
    hovered_node: Optional[str] = None
    search_query: str = ""
    focused_community: Optional[int] = None


@dataclass(frozen=True)
class GraphState:
    controls: ControlState = field(default_factory=ControlState)
    interaction: InteractionState = field(default_factory=InteractionState)
    graph_ready: bool = False


INITIAL_GRAPH_STATE = GraphState()
