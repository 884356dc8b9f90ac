"""
Interaction Layer

Actions, the pure reducer that interprets them, and the search resolver.
"""

from .actions import (
    ActionType, Action, UpdateControls, SetHoveredNode, SetSelectedNode,
    SetSearchQuery, SetFocusedCommunity, SetLayoutRunning, SetGraphReady,
    ResetInteraction,
)
from .reducer import graph_reducer
from .search import SearchResolver, SearchResult, NOT_FOUND_MESSAGE

__all__ = [
    'ActionType', 'Action', 'UpdateControls', 'SetHoveredNode', 'SetSelectedNode',
    'SetSearchQuery', 'SetFocusedCommunity', 'SetLayoutRunning', 'SetGraphReady',
    'ResetInteraction', 'graph_reducer',
    'SearchResolver', 'SearchResult', 'NOT_FOUND_MESSAGE',
]
