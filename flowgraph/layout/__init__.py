"""
Layout Subpackage

ForceAtlas2 physics, the Barnes-Hut tree it uses for repulsion, and the
runner that drives it synchronously or in the background.
"""

from .forceatlas2 import ForceAtlas2, ForceAtlas2Settings, infer_slow_down, total_edge_overlap
from .quadtree import QuadTree
from .runner import LayoutConfig, LayoutRunner

__all__ = [
    'ForceAtlas2', 'ForceAtlas2Settings', 'infer_slow_down', 'total_edge_overlap',
    'QuadTree', 'LayoutConfig', 'LayoutRunner',
]
