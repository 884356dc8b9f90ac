"""
Graph Builder
=============

Transforms an upstream edge-list payload into a fresh TransferGraph.

BOUNDARY ENFORCEMENT:
- Consumes GraphPayload
- Produces a new TransferGraph, never patches one already in use
- NO community assignment, NO sizing, NO physics

Node totals come from the roster, which the data service computes over
the full unfiltered edge set. A node therefore shows its true activity
even when only its strongest edges survive the node cap.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import logging
import math

from ..contracts.base import Metric
from ..contracts.payload import EdgeRecord, GraphPayload, NodeRecord
from .model import EdgeAttributes, NodeAttributes, TransferGraph, edge_key

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class BuilderConfig:
    """Configuration for graph construction."""
    base_radius: float = 100.0
    radius_span: int = 400
    edge_size_min: float = 0.5
    edge_size_max: float = 3.0
    edge_size_divisor: float = 2.0
    min_edge_weight: float = 0.0
    hide_isolated: bool = False


# =============================================================================
# DETERMINISTIC PLACEMENT
# =============================================================================

def hash_code(value: str) -> int:
    """
    31-multiplier string hash folded to a signed 32-bit int, then made
    non-negative. Stable across processes, unlike hash().
    """
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def initial_position(
    node_id: str,
    base_radius: float = 100.0,
    radius_span: int = 400
) -> Tuple[float, float]:
    """Point on a ring around the origin derived only from the id."""
    h = hash_code(node_id)
    angle = (h % 360) * (math.pi / 180)
    radius = base_radius + (h % radius_span)
    return radius * math.cos(angle), radius * math.sin(angle)


def edge_weight(value: float) -> float:
    """Layout weight of an edge: log10(1 + metric value)."""
    return math.log10(1 + max(value, 0.0))


def short_label(address: str) -> str:
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


# =============================================================================
# BUILDER
# =============================================================================

class GraphBuilder:
    """Build TransferGraph instances from payloads."""

    def __init__(self, config: Optional[BuilderConfig] = None):
        self._config = config or BuilderConfig()

    @property
    def config(self) -> BuilderConfig:
        return self._config

    def build(
        self,
        payload: GraphPayload,
        metric: Metric | str = Metric.VOLUME
    ) -> TransferGraph:
        """
        Build a graph from the payload roster and edges.

        Edges whose endpoints are not in the roster are skipped. That is
        the normal result of upstream node capping, not an error.
        Edge weights always follow `metric`; any weight carried by the
        payload is ignored.
        Raises DuplicateNodeError if two roster entries share an address.
        """
        metric = Metric.parse(metric)
        graph = TransferGraph()

        for record in payload.nodes:
            self._add_node(graph, record)

        merged, skipped = self._merge_edges(graph, payload, metric)
        for (source, target), attrs in merged.items():
            if attrs.weight < self._config.min_edge_weight:
                continue
            graph.add_edge(source, target, attrs)

        if skipped:
            logger.debug("Skipped %d edges with endpoints outside the roster", skipped)

        if self._config.hide_isolated:
            graph = self._without_isolated(graph)

        return graph

    def _add_node(self, graph: TransferGraph, record: NodeRecord) -> None:
        node_id = record.id.lower()
        x, y = initial_position(node_id, self._config.base_radius, self._config.radius_span)
        graph.add_node(node_id, NodeAttributes(
            id=node_id,
            label=record.label or short_label(node_id),
            in_degree=record.in_degree,
            out_degree=record.out_degree,
            total_volume=record.total_volume,
            total_tx_count=record.total_tx_count,
            x=x,
            y=y,
        ))

    def _merge_edges(
        self,
        graph: TransferGraph,
        payload: GraphPayload,
        metric: Metric
    ) -> Tuple[Dict[Tuple[str, str], EdgeAttributes], int]:
        """
        Collect payload edges by ordered pair.

        Repeated pairs are summed, and their weight recomputed from the
        summed metric.
        """
        merged: Dict[Tuple[str, str], EdgeAttributes] = {}
        skipped = 0

        for record in payload.edges:
            source = record.source.lower()
            target = record.target.lower()
            if not (graph.has_node(source) and graph.has_node(target)):
                skipped += 1
                continue

            key = (source, target)
            existing = merged.get(key)
            if existing is None:
                merged[key] = self._edge_attributes(source, target, record, metric)
                continue

            logger.debug("Merging repeated edge %s", edge_key(source, target))
            existing.tx_count += record.tx_count
            existing.volume += record.volume
            existing.weight = edge_weight(existing.metric_value(metric))
            existing.size = self._edge_size(existing.weight)

        return merged, skipped

    def _edge_attributes(
        self,
        source: str,
        target: str,
        record: EdgeRecord,
        metric: Metric
    ) -> EdgeAttributes:
        attrs = EdgeAttributes(
            source=source,
            target=target,
            tx_count=record.tx_count,
            volume=record.volume,
        )
        attrs.weight = edge_weight(attrs.metric_value(metric))
        attrs.size = self._edge_size(attrs.weight)
        return attrs

    def _edge_size(self, weight: float) -> float:
        cfg = self._config
        return max(cfg.edge_size_min, min(cfg.edge_size_max, weight / cfg.edge_size_divisor))

    def _without_isolated(self, graph: TransferGraph) -> TransferGraph:
        """Copy of `graph` keeping only nodes with at least one edge."""
        kept = TransferGraph()
        for attrs in graph.nodes():
            if graph.neighbors(attrs.id) or graph.has_edge_between(attrs.id, attrs.id):
                kept.add_node(attrs.id, attrs)
        for attrs in graph.edges():
            kept.add_edge(attrs.source, attrs.target, attrs)
        return kept
