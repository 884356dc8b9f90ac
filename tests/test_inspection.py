"""
Inspection Read Model Tests
"""

import pytest

from flowgraph.core.builder import GraphBuilder
from flowgraph.core.communities import COMMUNITY_COLORS, CommunityOverlay
from flowview.inspection import (
    DIRECTION_IN, DIRECTION_OUT, build_legend, build_node_details, build_tooltip
)

from tests.fixtures import ADDR_A, ADDR_B, ADDR_C, edge, node, payload, triangle_payload


@pytest.fixture
def graph():
    data = triangle_payload({ADDR_A: 2, ADDR_B: 2})
    g = GraphBuilder().build(data)
    CommunityOverlay().apply(g, data.cluster_assignments())
    return g


class TestNodeDetails:

    def test_neighbors_ranked_by_weight(self, graph):
        details = build_node_details(graph, ADDR_A)
        assert [n.address for n in details.top_neighbors] == [ADDR_B, ADDR_C]
        assert all(n.direction == DIRECTION_OUT for n in details.top_neighbors)

    def test_directions(self, graph):
        details = build_node_details(graph, ADDR_B)
        directions = {n.address: n.direction for n in details.top_neighbors}
        assert directions == {ADDR_A: DIRECTION_IN, ADDR_C: DIRECTION_OUT}

    def test_community_size(self, graph):
        details = build_node_details(graph, ADDR_A)
        assert details.community_id == 2
        assert details.community_size == 2
        assert details.color == COMMUNITY_COLORS[2]

    def test_totals(self, graph):
        details = build_node_details(graph, ADDR_C)
        assert details.total_volume == 60
        assert details.in_degree == 2
        assert details.out_degree == 0

    def test_neighbor_limit(self):
        hub = "0xhub"
        leaves = [f"0xleaf{i:02d}" for i in range(15)]
        data = payload(
            [node(hub)] + [node(a) for a in leaves],
            [edge(hub, a, volume=i + 1) for i, a in enumerate(leaves)],
        )
        details = build_node_details(GraphBuilder().build(data), hub)
        assert len(details.top_neighbors) == 10
        assert details.top_neighbors[0].address == "0xleaf14"

    def test_stale_id(self, graph):
        assert build_node_details(graph, "0xgone") is None
        assert build_node_details(graph, None) is None
        assert build_node_details(None, ADDR_A) is None


class TestTooltip:

    def test_tooltip(self, graph):
        tooltip = build_tooltip(graph, ADDR_B)
        assert tooltip.degree == 2
        assert tooltip.total_tx_count == 7
        assert build_tooltip(graph, "0xgone") is None


class TestLegend:

    def test_largest_first(self, graph):
        legend = build_legend(graph)
        assert [(e.community_id, e.count) for e in legend] == [(2, 2), (0, 1)]
        assert legend[0].color == COMMUNITY_COLORS[2]

    def test_focus_flag(self, graph):
        legend = build_legend(graph, focused_community=0)
        assert [e.focused for e in legend] == [False, True]

    def test_limit(self):
        addresses = [f"0x{i:02d}" for i in range(12)]
        data = payload([node(a, cluster=i) for i, a in enumerate(addresses)], [])
        g = GraphBuilder().build(data)
        CommunityOverlay().apply(g, data.cluster_assignments())
        assert len(build_legend(g)) == 10

    def test_no_graph(self):
        assert build_legend(None) == []
