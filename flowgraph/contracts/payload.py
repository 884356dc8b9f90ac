"""
Upstream Payload Contracts

Schema of the weekly edge-list response produced by the data service,
plus the raw edge row shape the aggregation step consumes.

BOUNDARY ENFORCEMENT:
- Wire names are camelCase; Python attributes are snake_case
- Records are validated once here and treated as read-only afterwards
- Export is a passthrough of exactly what was received
"""

from __future__ import annotations
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class NodeRecord(_WireModel):
    """One address in the node roster, with aggregates over all its edges."""
    id: str = Field(min_length=1)
    label: Optional[str] = None
    degree: int = Field(default=0, ge=0)
    in_degree: int = Field(default=0, ge=0)
    out_degree: int = Field(default=0, ge=0)
    total_volume: float = Field(default=0.0, ge=0)
    total_tx_count: float = Field(default=0.0, ge=0)
    stable_cluster_id: Optional[int] = None


class EdgeRecord(_WireModel):
    """One aggregated directed transfer relationship for the week."""
    id: Optional[str] = None
    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    tx_count: float = Field(default=0.0, ge=0)
    volume: float = Field(default=0.0, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)


class GraphMeta(_WireModel):
    """Totals before node capping, and maxima used for normalization."""
    week_start: Optional[str] = None
    token: str = "all"
    chain: str = "all"
    tier: Optional[int] = None
    total_nodes: int = Field(default=0, ge=0)
    total_edges: int = Field(default=0, ge=0)
    max_volume: float = Field(default=0.0, ge=0)
    max_tx_count: float = Field(default=0.0, ge=0)


class GraphPayload(_WireModel):
    """Full response of the edge-list request."""
    nodes: List[NodeRecord] = Field(default_factory=list)
    edges: List[EdgeRecord] = Field(default_factory=list)
    meta: GraphMeta = Field(default_factory=GraphMeta)
    generated_at: Optional[str] = None

    @classmethod
    def from_json(cls, text: str | bytes) -> GraphPayload:
        return cls.model_validate_json(text)

    def to_json(self) -> str:
        """Serialize the raw input data, not any computed layout."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def cluster_assignments(self) -> Dict[str, int]:
        """Address (lowercase) -> stable cluster id, for nodes that have one."""
        return {
            node.id.lower(): node.stable_cluster_id
            for node in self.nodes
            if node.stable_cluster_id is not None
        }


class EdgeRow(BaseModel):
    """Raw aggregated row as read from the weekly edges table."""
    model_config = ConfigDict(frozen=True)

    from_address: str = Field(min_length=1)
    to_address: str = Field(min_length=1)
    volume: float = Field(default=0.0, ge=0)
    tx_count: float = Field(default=0.0, ge=0)
