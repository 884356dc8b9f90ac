"""
Graph Model
===========

In-memory directed, non-multi graph of blockchain addresses.

Nodes are keyed by lowercase address strings. Each node and edge carries a
fixed attribute record; derived fields (size, color, community) are always
present with placeholder values until the pipeline stage that owns them
runs.

OWNERSHIP:
==========
Only the builder, the community overlay, the size encoder and the layout
engine mutate a TransferGraph. The view layer reads it and never writes.
A graph that has been replaced is invalidated so that late layout writes
can be refused.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Set, Tuple
import networkx as nx

from ..contracts.base import Metric
from ..contracts.errors import DuplicateEdgeError, DuplicateNodeError, UnknownNodeError


DEFAULT_NODE_SIZE = 5.0
DEFAULT_NODE_COLOR = "#666666"
DEFAULT_EDGE_COLOR = "#444444"

_ATTRS = "attrs"


def edge_key(source: str, target: str) -> str:
    """Composite edge id for an ordered pair."""
    return f"{source}-{target}"


# =============================================================================
# ATTRIBUTE RECORDS
# =============================================================================

@dataclass
class NodeAttributes:
    """
    Attributes of one address.

    `community_id` is 0 until the overlay runs and may be set to None when
    no assignment exists. `size`, `color`, `x` and `y` are derived and may
    be recomputed at any time.
    """
    id: str
    label: str = ""
    in_degree: int = 0
    out_degree: int = 0
    total_volume: float = 0.0
    total_tx_count: float = 0.0
    community_id: Optional[int] = 0
    size: float = DEFAULT_NODE_SIZE
    color: str = DEFAULT_NODE_COLOR
    x: float = 0.0
    y: float = 0.0

    @property
    def degree(self) -> int:
        return self.in_degree + self.out_degree

    def metric_value(self, metric: Metric) -> float:
        if metric is Metric.TX_COUNT:
            return self.total_tx_count
        return self.total_volume


@dataclass
class EdgeAttributes:
    """
    Attributes of one aggregated transfer relationship.

    `weight` feeds layout attraction only. `size` is the stroke width.
    """
    source: str
    target: str
    tx_count: float = 0.0
    volume: float = 0.0
    weight: float = 0.0
    size: float = 0.5
    color: str = DEFAULT_EDGE_COLOR

    @property
    def id(self) -> str:
        return edge_key(self.source, self.target)

    def metric_value(self, metric: Metric) -> float:
        if metric is Metric.TX_COUNT:
            return self.tx_count
        return self.volume


# =============================================================================
# GRAPH
# =============================================================================

class TransferGraph:
    """
    Simple directed graph over NodeAttributes / EdgeAttributes records.

    Wraps a networkx DiGraph for adjacency and keeps an edge-id index so
    that membership checks by id stay O(1).
    """

    def __init__(self):
        self._graph = nx.DiGraph()
        self._edge_index: Dict[str, Tuple[str, str]] = {}
        self._live = True

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_node(self, node_id: str, attrs: Optional[NodeAttributes] = None) -> NodeAttributes:
        """Add a node. Raises DuplicateNodeError if the id is taken."""
        if self._graph.has_node(node_id):
            raise DuplicateNodeError(node_id)
        if attrs is None:
            attrs = NodeAttributes(id=node_id)
        attrs.id = node_id
        self._graph.add_node(node_id, **{_ATTRS: attrs})
        return attrs

    def add_edge(
        self,
        source: str,
        target: str,
        attrs: Optional[EdgeAttributes] = None
    ) -> EdgeAttributes:
        """
        Add a directed edge.

        Raises UnknownNodeError if an endpoint is missing and
        DuplicateEdgeError if the ordered pair already has an edge.
        """
        for endpoint in (source, target):
            if not self._graph.has_node(endpoint):
                raise UnknownNodeError(endpoint)
        if self._graph.has_edge(source, target):
            raise DuplicateEdgeError(source, target)

        if attrs is None:
            attrs = EdgeAttributes(source=source, target=target)
        attrs.source = source
        attrs.target = target

        self._graph.add_edge(source, target, **{_ATTRS: attrs})
        self._edge_index[attrs.id] = (source, target)
        return attrs

    def invalidate(self) -> None:
        """Mark this graph as discarded. Layout runs stop writing into it."""
        self._live = False

    @property
    def is_live(self) -> bool:
        return self._live

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    def has_node(self, node_id: Optional[str]) -> bool:
        return node_id is not None and self._graph.has_node(node_id)

    def has_edge(self, edge_id: Optional[str]) -> bool:
        return edge_id is not None and edge_id in self._edge_index

    def has_edge_between(self, source: str, target: str) -> bool:
        return self._graph.has_edge(source, target)

    def __contains__(self, node_id: object) -> bool:
        return isinstance(node_id, str) and self._graph.has_node(node_id)

    def __len__(self) -> int:
        return self.order

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def node(self, node_id: str) -> NodeAttributes:
        """Attributes of a node. Raises UnknownNodeError."""
        if not self._graph.has_node(node_id):
            raise UnknownNodeError(node_id)
        return self._graph.nodes[node_id][_ATTRS]

    def get_node(self, node_id: Optional[str]) -> Optional[NodeAttributes]:
        """Attributes of a node, or None for an unknown or stale id."""
        if not self.has_node(node_id):
            return None
        return self._graph.nodes[node_id][_ATTRS]

    def edge(self, edge_id: str) -> EdgeAttributes:
        endpoints = self._edge_index.get(edge_id)
        if endpoints is None:
            raise KeyError(f"Edge not found: {edge_id}")
        return self._graph.edges[endpoints][_ATTRS]

    def edge_between(self, source: str, target: str) -> Optional[EdgeAttributes]:
        if not self._graph.has_edge(source, target):
            return None
        return self._graph.edges[source, target][_ATTRS]

    def edge_endpoints(self, edge_id: str) -> Tuple[str, str]:
        endpoints = self._edge_index.get(edge_id)
        if endpoints is None:
            raise KeyError(f"Edge not found: {edge_id}")
        return endpoints

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def node_ids(self) -> Iterator[str]:
        """Node ids in insertion order."""
        return iter(self._graph.nodes)

    def nodes(self) -> Iterator[NodeAttributes]:
        for _, data in self._graph.nodes(data=_ATTRS):
            yield data

    def edges(self) -> Iterator[EdgeAttributes]:
        for _, _, data in self._graph.edges(data=_ATTRS):
            yield data

    def neighbors(self, node_id: Optional[str]) -> Set[str]:
        """
        Ids connected to `node_id` by an edge in either direction.

        Unknown ids have no neighbors.
        """
        if not self.has_node(node_id):
            return set()
        result = set(self._graph.successors(node_id))
        result.update(self._graph.predecessors(node_id))
        result.discard(node_id)
        return result

    def incident_edges(self, node_id: str) -> Iterator[EdgeAttributes]:
        """Outgoing then incoming edges of a node. Self-loops appear once."""
        if not self.has_node(node_id):
            return
        for _, _, data in self._graph.out_edges(node_id, data=_ATTRS):
            yield data
        for source, _, data in self._graph.in_edges(node_id, data=_ATTRS):
            if source != node_id:
                yield data

    def for_each_edge(self, node_id: str, fn: Callable[[EdgeAttributes], None]) -> None:
        for edge in self.incident_edges(node_id):
            fn(edge)

    # -------------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------------

    @property
    def order(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def size(self) -> int:
        return self._graph.number_of_edges()

    def positions(self) -> Dict[str, Tuple[float, float]]:
        """Snapshot of current node positions."""
        return {attrs.id: (attrs.x, attrs.y) for attrs in self.nodes()}
