"""
Search Resolver Tests
"""

import pytest

from flowgraph.core.model import TransferGraph
from flowview.interaction.search import NOT_FOUND_MESSAGE, SearchResolver


@pytest.fixture
def graph():
    g = TransferGraph()
    # ids kept as given so case handling is visible
    g.add_node("0xAbC123")
    g.add_node("0xabd456")
    g.add_node("0xfff000")
    return g


@pytest.fixture
def resolver():
    return SearchResolver()


class TestTiers:

    def test_exact(self, resolver, graph):
        assert resolver.resolve("0xabd456", graph).node_id == "0xabd456"

    def test_exact_after_lowercasing(self, resolver, graph):
        assert resolver.resolve("0XABD456", graph).node_id == "0xabd456"

    def test_case_insensitive_full_match(self, resolver, graph):
        result = resolver.resolve("0xabc123", graph)
        assert result.found
        assert result.node_id == "0xAbC123"

    def test_full_match_beats_earlier_prefix(self, resolver):
        g = TransferGraph()
        g.add_node("0xab12")
        g.add_node("0xAB")
        assert resolver.resolve("0xab", g).node_id == "0xAB"

    def test_prefix_first_in_iteration_order(self, resolver, graph):
        assert resolver.resolve("0xa", graph).node_id == "0xAbC123"
        assert resolver.resolve("0xabd", graph).node_id == "0xabd456"

    def test_surrounding_whitespace_ignored(self, resolver, graph):
        assert resolver.resolve("  0xfff000 ", graph).node_id == "0xfff000"


class TestOutcomes:

    def test_empty_query_is_noop(self, resolver, graph):
        result = resolver.resolve("", graph)
        assert result.is_noop
        assert result.error is None
        assert resolver.resolve("   ", graph).is_noop

    def test_no_graph_is_noop(self, resolver):
        assert resolver.resolve("0xabc", None).is_noop

    def test_miss(self, resolver, graph):
        result = resolver.resolve("0x999", graph)
        assert not result.found
        assert result.error == NOT_FOUND_MESSAGE == "Address not found in graph"
