"""
Shared Test Fixtures

Explicit, hand-written payloads. Addresses are fixed strings so that
placement and hashing stay reproducible across runs.
"""

import random
from typing import Dict, List, Optional

from flowgraph.contracts.payload import EdgeRecord, GraphMeta, GraphPayload, NodeRecord


# =============================================================================
# ADDRESSES
# =============================================================================

ADDR_A = "0xaaaa000000000000000000000000000000000001"
ADDR_B = "0xbbbb000000000000000000000000000000000002"
ADDR_C = "0xcccc000000000000000000000000000000000003"
ADDR_D = "0xdddd000000000000000000000000000000000004"

WEEK = "2024-01-01"


# =============================================================================
# BUILDERS
# =============================================================================

def node(
    address: str,
    volume: float = 0.0,
    tx_count: float = 0.0,
    in_degree: int = 0,
    out_degree: int = 0,
    cluster: Optional[int] = None,
) -> NodeRecord:
    return NodeRecord(
        id=address,
        degree=in_degree + out_degree,
        in_degree=in_degree,
        out_degree=out_degree,
        total_volume=volume,
        total_tx_count=tx_count,
        stable_cluster_id=cluster,
    )


def edge(source: str, target: str, volume: float = 1.0, tx_count: float = 1.0, weight=None) -> EdgeRecord:
    return EdgeRecord(source=source, target=target, volume=volume, tx_count=tx_count, weight=weight)


def payload(nodes: List[NodeRecord], edges: List[EdgeRecord], week: str = WEEK) -> GraphPayload:
    return GraphPayload(
        nodes=nodes,
        edges=edges,
        meta=GraphMeta(week_start=week, total_nodes=len(nodes), total_edges=len(edges)),
    )


def triangle_payload(clusters: Optional[Dict[str, int]] = None) -> GraphPayload:
    """
    A->B (vol 100, tx 5), B->C (vol 50, tx 2), A->C (vol 10, tx 1).

    Totals: A 110/6, B 150/7, C 60/3.
    """
    clusters = clusters or {}
    return payload(
        nodes=[
            node(ADDR_A, 110, 6, in_degree=0, out_degree=2, cluster=clusters.get(ADDR_A)),
            node(ADDR_B, 150, 7, in_degree=1, out_degree=1, cluster=clusters.get(ADDR_B)),
            node(ADDR_C, 60, 3, in_degree=2, out_degree=0, cluster=clusters.get(ADDR_C)),
        ],
        edges=[
            edge(ADDR_A, ADDR_B, 100, 5),
            edge(ADDR_B, ADDR_C, 50, 2),
            edge(ADDR_A, ADDR_C, 10, 1),
        ],
    )


def triangle_wire() -> dict:
    """The triangle payload as it arrives on the wire (camelCase)."""
    return {
        "nodes": [
            {"id": ADDR_A, "degree": 2, "inDegree": 0, "outDegree": 2,
             "totalVolume": 110, "totalTxCount": 6, "stableClusterId": None},
            {"id": ADDR_B, "degree": 2, "inDegree": 1, "outDegree": 1,
             "totalVolume": 150, "totalTxCount": 7, "stableClusterId": None},
            {"id": ADDR_C, "degree": 2, "inDegree": 2, "outDegree": 0,
             "totalVolume": 60, "totalTxCount": 3, "stableClusterId": None},
        ],
        "edges": [
            {"id": f"{ADDR_A}-{ADDR_B}", "source": ADDR_A, "target": ADDR_B,
             "txCount": 5, "volume": 100, "weight": 2.0043213737826426},
            {"id": f"{ADDR_B}-{ADDR_C}", "source": ADDR_B, "target": ADDR_C,
             "txCount": 2, "volume": 50, "weight": 1.7075701760979363},
            {"id": f"{ADDR_A}-{ADDR_C}", "source": ADDR_A, "target": ADDR_C,
             "txCount": 1, "volume": 10, "weight": 1.0413926851582251},
        ],
        "meta": {
            "weekStart": WEEK, "token": "all", "chain": "all", "tier": None,
            "totalNodes": 3, "totalEdges": 3, "maxVolume": 100, "maxTxCount": 5,
        },
        "generatedAt": "2024-01-08T00:00:00Z",
    }


def random_connected_payload(seed: int, size: int) -> GraphPayload:
    """Random connected graph: a spanning chain plus a few extra edges."""
    rng = random.Random(seed)
    addresses = [f"0x{rng.getrandbits(160):040x}" for _ in range(size)]
    pairs = [(addresses[i], addresses[i + 1]) for i in range(size - 1)]
    for _ in range(size // 2):
        a, b = rng.sample(addresses, 2)
        if (a, b) not in pairs:
            pairs.append((a, b))

    volume: Dict[str, float] = {a: 0.0 for a in addresses}
    edges = []
    for source, target in pairs:
        amount = float(rng.randint(1, 10_000))
        volume[source] += amount
        volume[target] += amount
        edges.append(edge(source, target, amount, rng.randint(1, 50)))

    return payload([node(a, volume[a]) for a in addresses], edges)
