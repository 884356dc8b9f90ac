"""
Inspection Read Models

Snapshots of the graph shaped for detail panels, tooltips and the
community legend. Built on demand from the live graph; never cached and
never written back.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from flowgraph.core.communities import community_color, community_sizes
from flowgraph.core.model import TransferGraph


DIRECTION_IN = "in"
DIRECTION_OUT = "out"

DEFAULT_NEIGHBOR_LIMIT = 10
DEFAULT_LEGEND_LIMIT = 10


@dataclass(frozen=True)
class NeighborSummary:
    """One incident edge seen from the inspected node."""
    address: str
    weight: float
    direction: str


@dataclass(frozen=True)
class NodeDetails:
    node_id: str
    community_id: Optional[int]
    community_size: int
    color: str
    total_volume: float
    total_tx_count: float
    in_degree: int
    out_degree: int
    top_neighbors: Tuple[NeighborSummary, ...]


@dataclass(frozen=True)
class NodeTooltip:
    node_id: str
    community_id: Optional[int]
    color: str
    degree: int
    total_volume: float
    total_tx_count: float


@dataclass(frozen=True)
class LegendEntry:
    community_id: Optional[int]
    color: str
    count: int
    focused: bool


def build_node_details(
    graph: Optional[TransferGraph],
    node_id: Optional[str],
    limit: int = DEFAULT_NEIGHBOR_LIMIT
) -> Optional[NodeDetails]:
    """
    Details of one node, or None when the node is not in the graph.

    Neighbors are ranked by edge weight, heaviest first. A pair connected
    in both directions appears once per direction.
    """
    if graph is None:
        return None
    attrs = graph.get_node(node_id)
    if attrs is None:
        return None

    neighbors: List[NeighborSummary] = []
    for edge in graph.incident_edges(attrs.id):
        outgoing = edge.source == attrs.id
        neighbors.append(NeighborSummary(
            address=edge.target if outgoing else edge.source,
            weight=edge.weight,
            direction=DIRECTION_OUT if outgoing else DIRECTION_IN,
        ))
    neighbors.sort(key=lambda n: n.weight, reverse=True)

    community_size = sum(1 for n in graph.nodes() if n.community_id == attrs.community_id)

    return NodeDetails(
        node_id=attrs.id,
        community_id=attrs.community_id,
        community_size=community_size,
        color=attrs.color,
        total_volume=attrs.total_volume,
        total_tx_count=attrs.total_tx_count,
        in_degree=attrs.in_degree,
        out_degree=attrs.out_degree,
        top_neighbors=tuple(neighbors[:limit]),
    )


def build_tooltip(graph: Optional[TransferGraph], node_id: Optional[str]) -> Optional[NodeTooltip]:
    if graph is None:
        return None
    attrs = graph.get_node(node_id)
    if attrs is None:
        return None
    return NodeTooltip(
        node_id=attrs.id,
        community_id=attrs.community_id,
        color=attrs.color,
        degree=attrs.degree,
        total_volume=attrs.total_volume,
        total_tx_count=attrs.total_tx_count,
    )


def build_legend(
    graph: Optional[TransferGraph],
    focused_community: Optional[int] = None,
    limit: int = DEFAULT_LEGEND_LIMIT
) -> List[LegendEntry]:
    """Largest communities first; ties keep first-seen order."""
    if graph is None:
        return []
    ranked = community_sizes(graph).most_common(limit)
    return [
        LegendEntry(
            community_id=community_id,
            color=community_color(community_id),
            count=count,
            focused=community_id == focused_community,
        )
        for community_id, count in ranked
    ]
