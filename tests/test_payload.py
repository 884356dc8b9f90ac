"""
Payload Contract Tests

Wire-level parsing of the edge-list response and its export.
"""

import json

import pytest
from pydantic import ValidationError

from flowgraph.contracts.base import Metric, ScaleType
from flowgraph.contracts.payload import GraphPayload

from tests.fixtures import ADDR_A, WEEK, triangle_wire


class TestParsing:

    def test_camel_case_wire_names(self):
        data = GraphPayload.model_validate(triangle_wire())
        assert data.nodes[0].total_volume == 110
        assert data.nodes[0].in_degree == 0
        assert data.edges[0].tx_count == 5
        assert data.meta.week_start == WEEK

    def test_from_json(self):
        data = GraphPayload.from_json(json.dumps(triangle_wire()))
        assert len(data.nodes) == 3
        assert not data.is_empty

    def test_negative_volume_rejected(self):
        wire = triangle_wire()
        wire["edges"][0]["volume"] = -1
        with pytest.raises(ValidationError):
            GraphPayload.model_validate(wire)

    def test_records_are_frozen(self):
        data = GraphPayload.model_validate(triangle_wire())
        with pytest.raises(ValidationError):
            data.nodes[0].total_volume = 0

    def test_empty_payload(self):
        assert GraphPayload().is_empty


class TestExport:

    def test_to_json_uses_wire_names(self):
        data = GraphPayload.model_validate(triangle_wire())
        exported = json.loads(data.to_json())
        assert exported["meta"]["weekStart"] == WEEK
        assert exported["nodes"][0]["totalVolume"] == 110
        assert "x" not in exported["nodes"][0]

    def test_cluster_assignments_only_for_assigned(self):
        wire = triangle_wire()
        wire["nodes"][0]["stableClusterId"] = 4
        wire["nodes"][0]["id"] = ADDR_A.upper().replace("0X", "0x")
        data = GraphPayload.model_validate(wire)
        assert data.cluster_assignments() == {ADDR_A: 4}


class TestEnums:

    def test_parse_wire_values(self):
        assert Metric.parse("txCount") is Metric.TX_COUNT
        assert Metric.parse(Metric.VOLUME) is Metric.VOLUME
        assert ScaleType.parse("linear") is ScaleType.LINEAR

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            Metric.parse("price")
