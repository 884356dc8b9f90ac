"""
Graph Model Tests
=================

Structural guarantees of TransferGraph:
1. Simple directed graph: one edge per ordered pair
2. Edges only between existing nodes
3. Neighborhood is direction-agnostic
4. Invalidated graphs report themselves as such
"""

import pytest

from flowgraph.contracts.errors import (
    DuplicateEdgeError, DuplicateNodeError, GraphStructureError, UnknownNodeError
)
from flowgraph.core.model import (
    DEFAULT_EDGE_COLOR, DEFAULT_NODE_COLOR, EdgeAttributes, NodeAttributes,
    TransferGraph, edge_key,
)


@pytest.fixture
def graph():
    g = TransferGraph()
    for node_id in ("a", "b", "c", "d"):
        g.add_node(node_id)
    g.add_edge("a", "b", EdgeAttributes(source="a", target="b", volume=10, weight=1.0))
    g.add_edge("b", "a", EdgeAttributes(source="b", target="a", volume=5, weight=0.5))
    g.add_edge("c", "a", EdgeAttributes(source="c", target="a", volume=1, weight=0.3))
    return g


class TestStructure:

    def test_counts(self, graph):
        assert graph.order == 4
        assert graph.size == 3
        assert len(graph) == 4

    def test_duplicate_node_rejected(self, graph):
        with pytest.raises(DuplicateNodeError):
            graph.add_node("a")

    def test_duplicate_edge_rejected(self, graph):
        with pytest.raises(DuplicateEdgeError):
            graph.add_edge("a", "b")

    def test_reverse_edge_is_distinct(self, graph):
        assert graph.has_edge(edge_key("a", "b"))
        assert graph.has_edge(edge_key("b", "a"))

    def test_edge_to_unknown_node_rejected(self, graph):
        with pytest.raises(UnknownNodeError) as info:
            graph.add_edge("a", "zzz")
        assert info.value.node_id == "zzz"

    def test_errors_share_a_base(self):
        assert issubclass(DuplicateNodeError, GraphStructureError)
        assert issubclass(UnknownNodeError, GraphStructureError)

    def test_defaults_present_before_pipeline(self):
        g = TransferGraph()
        attrs = g.add_node("x")
        assert attrs.community_id == 0
        assert attrs.color == DEFAULT_NODE_COLOR
        g.add_node("y")
        assert g.add_edge("x", "y").color == DEFAULT_EDGE_COLOR


class TestLookup:

    def test_node_lookup(self, graph):
        assert graph.node("a").id == "a"
        with pytest.raises(UnknownNodeError):
            graph.node("missing")

    def test_get_node_tolerates_stale_ids(self, graph):
        assert graph.get_node("missing") is None
        assert graph.get_node(None) is None

    def test_edge_lookup_by_id(self, graph):
        attrs = graph.edge("a-b")
        assert attrs.volume == 10
        assert graph.edge_endpoints("c-a") == ("c", "a")
        with pytest.raises(KeyError):
            graph.edge("a-d")

    def test_contains(self, graph):
        assert "a" in graph
        assert "missing" not in graph
        assert 42 not in graph


class TestNeighborhood:

    def test_neighbors_ignore_direction(self, graph):
        assert graph.neighbors("a") == {"b", "c"}
        assert graph.neighbors("c") == {"a"}

    def test_isolated_node_has_no_neighbors(self, graph):
        assert graph.neighbors("d") == set()

    def test_unknown_node_has_no_neighbors(self, graph):
        assert graph.neighbors("missing") == set()
        assert list(graph.incident_edges("missing")) == []

    def test_incident_edges_out_then_in(self, graph):
        ids = [e.id for e in graph.incident_edges("a")]
        assert ids == ["a-b", "b-a", "c-a"]

    def test_self_loop_listed_once(self):
        g = TransferGraph()
        g.add_node("x")
        g.add_edge("x", "x")
        assert [e.id for e in g.incident_edges("x")] == ["x-x"]
        assert g.neighbors("x") == set()

    def test_for_each_edge(self, graph):
        seen = []
        graph.for_each_edge("b", lambda e: seen.append(e.id))
        assert sorted(seen) == ["a-b", "b-a"]


class TestLifecycle:

    def test_invalidate(self, graph):
        assert graph.is_live
        graph.invalidate()
        assert not graph.is_live

    def test_positions_snapshot(self):
        g = TransferGraph()
        g.add_node("x", NodeAttributes(id="x", x=1.5, y=-2.0))
        assert g.positions() == {"x": (1.5, -2.0)}

    def test_degree_is_in_plus_out(self):
        attrs = NodeAttributes(id="x", in_degree=3, out_degree=4)
        assert attrs.degree == 7
