"""
Search Resolver

Maps a free-text address query onto a node of the current graph.

Resolution tiers, first hit wins:
1. exact id match on the lowercased query
2. case-insensitive full match, first in graph iteration order
3. case-insensitive prefix match, first in graph iteration order

A blank query or a missing graph is a no-op. A miss is reported as a
result, not raised.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from flowgraph.core.model import TransferGraph


NOT_FOUND_MESSAGE = "Address not found in graph"


@dataclass(frozen=True)
class SearchResult:
    node_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.node_id is not None

    @property
    def is_noop(self) -> bool:
        return self.node_id is None and self.error is None


NOOP_RESULT = SearchResult()


class SearchResolver:
    """Stateless; one instance can serve any number of graphs."""

    def resolve(self, query: Optional[str], graph: Optional[TransferGraph]) -> SearchResult:
        if graph is None or query is None:
            return NOOP_RESULT
        needle = query.strip().lower()
        if not needle:
            return NOOP_RESULT

        if graph.has_node(needle):
            return SearchResult(node_id=needle)

        prefix_hit: Optional[str] = None
        for node_id in graph.node_ids():
            candidate = node_id.lower()
            if candidate == needle:
                return SearchResult(node_id=node_id)
            if prefix_hit is None and candidate.startswith(needle):
                prefix_hit = node_id

        if prefix_hit is not None:
            return SearchResult(node_id=prefix_hit)
        return SearchResult(error=NOT_FOUND_MESSAGE)
