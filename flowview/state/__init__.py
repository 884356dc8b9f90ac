"""
State Layer

Immutable state consumed by the renderer and replaced slice by slice by
the reducer.
"""

from .store import ControlState, InteractionState, GraphState, INITIAL_GRAPH_STATE

__all__ = ['ControlState', 'InteractionState', 'GraphState', 'INITIAL_GRAPH_STATE']
