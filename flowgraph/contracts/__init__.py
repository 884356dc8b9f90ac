"""
Contracts Module

Types shared between the graph engine and the view layer: the upstream
payload schema, the metric/scale enums and the exception hierarchy.

DESIGN PRINCIPLES:
==================
1. Payload records are validated once, at the boundary
2. Structural violations are exceptions, degraded data is not
3. Enum values match the wire strings used by the data service
"""

from .base import Metric, ScaleType, LayoutStatus
from .errors import (
    GraphError, GraphStructureError, DuplicateNodeError,
    DuplicateEdgeError, UnknownNodeError, LayoutComputationError
)
from .payload import NodeRecord, EdgeRecord, GraphMeta, GraphPayload, EdgeRow

__all__ = [
    'Metric', 'ScaleType', 'LayoutStatus',
    'GraphError', 'GraphStructureError', 'DuplicateNodeError',
    'DuplicateEdgeError', 'UnknownNodeError', 'LayoutComputationError',
    'NodeRecord', 'EdgeRecord', 'GraphMeta', 'GraphPayload', 'EdgeRow',
]
