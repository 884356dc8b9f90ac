"""
Visual Overrides
================

Deterministic transformation of (GraphState, TransferGraph) into the
per-node and per-edge display overrides a renderer applies on top of the
graph's base attributes.

POLICY (first matching rule wins):
==================================
1. Community focus: nodes outside the focused community are hidden, as
   are edges with an endpoint outside it. Everything else is untouched.
2. Active node (hover, else selection): the node is highlighted on top,
   its neighbors are raised, every other node is muted to the bottom.
   Incident edges are brightened and raised, all others darkened.
3. Otherwise: no overrides.

Overrides are never written into the graph. An active node id that is
not in the graph (stale after a rebuild) counts as absent.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

from flowgraph.core.model import EdgeAttributes, NodeAttributes, TransferGraph
from flowview.state.store import GraphState, InteractionState


MUTED_NODE_COLOR = "#333333"
ACTIVE_EDGE_COLOR = "#888888"
INACTIVE_EDGE_COLOR = "#111111"

Z_ACTIVE = 2
Z_NEIGHBOR = 1
Z_BACKGROUND = 0


@dataclass(frozen=True)
class NodeOverride:
    """None means keep the base attribute."""
    hidden: bool = False
    highlighted: bool = False
    color: Optional[str] = None
    z_index: Optional[int] = None


@dataclass(frozen=True)
class EdgeOverride:
    hidden: bool = False
    color: Optional[str] = None
    z_index: Optional[int] = None


NO_NODE_OVERRIDE = NodeOverride()
NO_EDGE_OVERRIDE = EdgeOverride()
HIDDEN_NODE = NodeOverride(hidden=True)
HIDDEN_EDGE = EdgeOverride(hidden=True)


@dataclass(frozen=True)
class VisualOverrides:
    """Overrides keyed by node id and edge id. Missing keys mean none."""
    nodes: Mapping[str, NodeOverride] = field(default_factory=dict)
    edges: Mapping[str, EdgeOverride] = field(default_factory=dict)

    def node(self, node_id: str) -> NodeOverride:
        return self.nodes.get(node_id, NO_NODE_OVERRIDE)

    def edge(self, edge_id: str) -> EdgeOverride:
        return self.edges.get(edge_id, NO_EDGE_OVERRIDE)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges


EMPTY_OVERRIDES = VisualOverrides()


def resolve_active_node(interaction: InteractionState, graph: TransferGraph) -> Optional[str]:
    """Hovered node if it exists, else selected node if it exists."""
    for candidate in (interaction.hovered_node, interaction.selected_node):
        if graph.has_node(candidate):
            return candidate
    return None


def compute_visual_overrides(
    state: Union[GraphState, InteractionState],
    graph: Optional[TransferGraph]
) -> VisualOverrides:
    """Overrides for the current interaction state. Pure; reads only."""
    if graph is None or graph.order == 0:
        return EMPTY_OVERRIDES
    interaction = state.interaction if isinstance(state, GraphState) else state

    if interaction.focused_community is not None:
        return _community_focus(graph, interaction.focused_community)

    active = resolve_active_node(interaction, graph)
    if active is not None:
        return _neighborhood_highlight(graph, active)

    return EMPTY_OVERRIDES


def _community_focus(graph: TransferGraph, community_id: int) -> VisualOverrides:
    nodes: Dict[str, NodeOverride] = {}
    outside = set()
    for attrs in graph.nodes():
        if attrs.community_id != community_id:
            nodes[attrs.id] = HIDDEN_NODE
            outside.add(attrs.id)

    edges: Dict[str, EdgeOverride] = {}
    for attrs in graph.edges():
        if attrs.source in outside or attrs.target in outside:
            edges[attrs.id] = HIDDEN_EDGE

    return VisualOverrides(nodes=nodes, edges=edges)


def _neighborhood_highlight(graph: TransferGraph, active: str) -> VisualOverrides:
    neighbors = graph.neighbors(active)
    active_override = NodeOverride(highlighted=True, z_index=Z_ACTIVE)
    neighbor_override = NodeOverride(z_index=Z_NEIGHBOR)
    muted_override = NodeOverride(color=MUTED_NODE_COLOR, z_index=Z_BACKGROUND)

    nodes: Dict[str, NodeOverride] = {}
    for node_id in graph.node_ids():
        if node_id == active:
            nodes[node_id] = active_override
        elif node_id in neighbors:
            nodes[node_id] = neighbor_override
        else:
            nodes[node_id] = muted_override

    incident = EdgeOverride(color=ACTIVE_EDGE_COLOR, z_index=Z_NEIGHBOR)
    other = EdgeOverride(color=INACTIVE_EDGE_COLOR, z_index=Z_BACKGROUND)
    edges: Dict[str, EdgeOverride] = {}
    for attrs in graph.edges():
        if attrs.source == active or attrs.target == active:
            edges[attrs.id] = incident
        else:
            edges[attrs.id] = other

    return VisualOverrides(nodes=nodes, edges=edges)


# =============================================================================
# DISPLAY RECORDS
# =============================================================================

@dataclass(frozen=True)
class NodeDisplay:
    """Renderable node: base attributes with the override applied."""
    node_id: str
    label: str
    x: float
    y: float
    size: float
    color: str
    hidden: bool
    highlighted: bool
    z_index: int


@dataclass(frozen=True)
class EdgeDisplay:
    """Renderable edge."""
    edge_id: str
    source_id: str
    target_id: str
    size: float
    color: str
    hidden: bool
    z_index: int


def node_display(attrs: NodeAttributes, override: NodeOverride = NO_NODE_OVERRIDE) -> NodeDisplay:
    return NodeDisplay(
        node_id=attrs.id,
        label=attrs.label,
        x=attrs.x,
        y=attrs.y,
        size=attrs.size,
        color=override.color or attrs.color,
        hidden=override.hidden,
        highlighted=override.highlighted,
        z_index=override.z_index if override.z_index is not None else Z_BACKGROUND,
    )


def edge_display(attrs: EdgeAttributes, override: EdgeOverride = NO_EDGE_OVERRIDE) -> EdgeDisplay:
    return EdgeDisplay(
        edge_id=attrs.id,
        source_id=attrs.source,
        target_id=attrs.target,
        size=attrs.size,
        color=override.color or attrs.color,
        hidden=override.hidden,
        z_index=override.z_index if override.z_index is not None else Z_BACKGROUND,
    )
