"""
Edge Row Aggregation
====================

Derives the node roster and payload from raw weekly edge rows.

Per-node totals are accumulated over every row that passes the minimum
edge filter, before the node cap is applied. The cap then keeps the top
`max_nodes` addresses by the chosen metric and drops edges that leave
the kept set.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..contracts.base import Metric
from ..contracts.payload import EdgeRecord, EdgeRow, GraphMeta, GraphPayload, NodeRecord
from .builder import edge_weight, short_label
from .model import edge_key

DEFAULT_MAX_NODES = 1000
MIN_MAX_NODES = 10
MAX_MAX_NODES = 10000


class _NodeBucket:
    """Mutable accumulator for a single address."""

    __slots__ = (
        "address", "in_degree", "out_degree", "in_volume", "out_volume",
        "in_tx_count", "out_tx_count",
    )

    def __init__(self, address: str):
        self.address = address
        self.in_degree = 0
        self.out_degree = 0
        self.in_volume = 0.0
        self.out_volume = 0.0
        self.in_tx_count = 0.0
        self.out_tx_count = 0.0

    @property
    def total_volume(self) -> float:
        return self.in_volume + self.out_volume

    @property
    def total_tx_count(self) -> float:
        return self.in_tx_count + self.out_tx_count

    def metric_value(self, metric: Metric) -> float:
        if metric is Metric.TX_COUNT:
            return self.total_tx_count
        return self.total_volume

    def to_record(self, cluster_id: Optional[int]) -> NodeRecord:
        return NodeRecord(
            id=self.address,
            label=short_label(self.address),
            degree=self.in_degree + self.out_degree,
            in_degree=self.in_degree,
            out_degree=self.out_degree,
            total_volume=self.total_volume,
            total_tx_count=self.total_tx_count,
            stable_cluster_id=cluster_id,
        )


def clamp_max_nodes(max_nodes: int) -> int:
    return max(MIN_MAX_NODES, min(MAX_MAX_NODES, int(max_nodes)))


def aggregate_edge_rows(
    rows: Iterable[Union[EdgeRow, Mapping[str, Any]]],
    metric: Metric | str = Metric.VOLUME,
    min_edge: float = 0.0,
    max_nodes: int = DEFAULT_MAX_NODES,
    cluster_assignments: Optional[Mapping[str, int]] = None,
    week_start: Optional[str] = None,
    token: str = "all",
    chain: str = "all",
    tier: Optional[int] = None,
) -> GraphPayload:
    """
    Build a GraphPayload from raw edge rows.

    Returns:
        GraphPayload whose meta reports totals before the node cap and
        maxima over every row, including rows below `min_edge`.
    """
    metric = Metric.parse(metric)
    max_nodes = clamp_max_nodes(max_nodes)
    assignments = {k.lower(): v for k, v in (cluster_assignments or {}).items()}

    buckets: Dict[str, _NodeBucket] = {}
    edges: List[EdgeRecord] = []
    max_volume = 0.0
    max_tx_count = 0.0
    total_edges = 0

    for raw in rows:
        row = raw if isinstance(raw, EdgeRow) else EdgeRow.model_validate(raw)
        total_edges += 1
        max_volume = max(max_volume, row.volume)
        max_tx_count = max(max_tx_count, row.tx_count)

        value = row.tx_count if metric is Metric.TX_COUNT else row.volume
        if value < min_edge:
            continue

        source = row.from_address.lower()
        target = row.to_address.lower()

        out_bucket = buckets.setdefault(source, _NodeBucket(source))
        in_bucket = buckets.setdefault(target, _NodeBucket(target))

        out_bucket.out_degree += 1
        out_bucket.out_volume += row.volume
        out_bucket.out_tx_count += row.tx_count

        in_bucket.in_degree += 1
        in_bucket.in_volume += row.volume
        in_bucket.in_tx_count += row.tx_count

        edges.append(EdgeRecord(
            id=edge_key(source, target),
            source=source,
            target=target,
            tx_count=row.tx_count,
            volume=row.volume,
            weight=edge_weight(value),
        ))

    ranked = sorted(buckets.values(), key=lambda b: b.metric_value(metric), reverse=True)
    kept = ranked[:max_nodes]
    allowed = {b.address for b in kept}

    return GraphPayload(
        nodes=[b.to_record(assignments.get(b.address)) for b in kept],
        edges=[e for e in edges if e.source in allowed and e.target in allowed],
        meta=GraphMeta(
            week_start=week_start,
            token=token,
            chain=chain,
            tier=tier,
            total_nodes=len(buckets),
            total_edges=total_edges,
            max_volume=max_volume,
            max_tx_count=max_tx_count,
        ),
    )
