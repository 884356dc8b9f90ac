"""
Community Overlay
=================

Applies externally computed cluster assignments to a TransferGraph and
derives node and edge colors from them.

BOUNDARY ENFORCEMENT:
- Consumes address -> cluster id assignments, never computes clusters
- Mutates community_id and color only
- Missing or unavailable assignments degrade to community 0
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Mapping, Optional
import logging

from .model import TransferGraph

logger = logging.getLogger(__name__)


# High contrast, colorblind-friendly
COMMUNITY_COLORS = (
    "#3b82f6",  # blue
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#ec4899",  # pink
    "#8b5cf6",  # violet
    "#06b6d4",  # cyan
    "#84cc16",  # lime
    "#f97316",  # orange
    "#6366f1",  # indigo
    "#14b8a6",  # teal
    "#a855f7",  # purple
    "#22c55e",  # green
    "#ef4444",  # red
    "#0ea5e9",  # sky
    "#eab308",  # yellow
)

UNCLUSTERED = 0
EDGE_ALPHA_SUFFIX = "66"


def community_color(community_id: Optional[int]) -> str:
    """Palette color for a community. Ids wrap around the palette."""
    if community_id is None:
        community_id = UNCLUSTERED
    return COMMUNITY_COLORS[community_id % len(COMMUNITY_COLORS)]


# =============================================================================
# OVERLAY
# =============================================================================

class CommunityOverlay:
    """Assign communities and colors to every node and edge of a graph."""

    def apply(
        self,
        graph: TransferGraph,
        assignments: Optional[Mapping[str, int]] = None
    ) -> Counter:
        """
        Set community_id and color on nodes, then color on edges.

        Edges take the color of their source node plus transparency.
        Returns per-community node counts.
        """
        lookup = {k.lower(): v for k, v in (assignments or {}).items()}
        counts: Counter = Counter()

        for node in graph.nodes():
            community_id = lookup.get(node.id.lower(), UNCLUSTERED)
            node.community_id = community_id
            node.color = community_color(community_id)
            counts[community_id] += 1

        for edge in graph.edges():
            edge.color = graph.node(edge.source).color + EDGE_ALPHA_SUFFIX

        return counts

    def apply_from_lookup(
        self,
        graph: TransferGraph,
        lookup: Optional[Callable[[], Mapping[str, int]]]
    ) -> Counter:
        """
        Fetch assignments through `lookup` and apply them.

        A failing lookup leaves every node in community 0.
        """
        assignments: Optional[Mapping[str, int]] = None
        if lookup is not None:
            try:
                assignments = lookup()
            except Exception as exc:
                logger.warning("Cluster assignments unavailable, using community 0: %s", exc)
        return self.apply(graph, assignments)


def community_sizes(graph: TransferGraph) -> Counter:
    """Node count per community as currently assigned."""
    return Counter(node.community_id for node in graph.nodes())


# =============================================================================
# ASSIGNMENT CACHE
# =============================================================================

@dataclass(frozen=True)
class CacheStats:
    entries: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class ClusterAssignmentCache:
    """
    Cache of cluster assignments keyed by query (week, token, chain, tier).

    Lives as long as its owner. Pass it to whoever needs lookups and call
    clear() when upstream clustering is recomputed.
    """

    def __init__(self):
        self._cache: Dict[Hashable, Dict[str, int]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: Hashable) -> Optional[Dict[str, int]]:
        entry = self._cache.get(key)
        if entry is None:
            self._misses += 1
            return None
        self._hits += 1
        return entry

    def put(self, key: Hashable, assignments: Mapping[str, int]) -> None:
        self._cache[key] = {k.lower(): v for k, v in assignments.items()}

    def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Mapping[str, int]]
    ) -> Dict[str, int]:
        """Cached assignments for `key`, loading them on a miss."""
        entry = self.get(key)
        if entry is None:
            self.put(key, loader())
            entry = self._cache[key]
        return entry

    def invalidate(self, key: Hashable) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> CacheStats:
        return CacheStats(entries=len(self._cache), hits=self._hits, misses=self._misses)
