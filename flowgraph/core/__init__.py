"""
Core Graph Subpackage

Graph model and the pipeline stages that populate it:
builder -> community overlay -> size encoder.
"""

from .model import (
    TransferGraph, NodeAttributes, EdgeAttributes, edge_key,
    DEFAULT_NODE_SIZE, DEFAULT_NODE_COLOR, DEFAULT_EDGE_COLOR
)
from .builder import BuilderConfig, GraphBuilder, hash_code, initial_position, edge_weight
from .aggregation import aggregate_edge_rows
from .communities import (
    COMMUNITY_COLORS, CommunityOverlay, ClusterAssignmentCache,
    community_color, community_sizes
)
from .sizing import SizeConfig, SizeEncoder

__all__ = [
    'TransferGraph', 'NodeAttributes', 'EdgeAttributes', 'edge_key',
    'DEFAULT_NODE_SIZE', 'DEFAULT_NODE_COLOR', 'DEFAULT_EDGE_COLOR',
    'BuilderConfig', 'GraphBuilder', 'hash_code', 'initial_position', 'edge_weight',
    'aggregate_edge_rows',
    'COMMUNITY_COLORS', 'CommunityOverlay', 'ClusterAssignmentCache',
    'community_color', 'community_sizes',
    'SizeConfig', 'SizeEncoder',
]
