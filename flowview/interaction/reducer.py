"""
Graph State Reducer

graph_reducer(state, action) is a PURE FUNCTION.
Same state + same action -> equal state, and untouched slices keep their
identity. An action that changes nothing returns the input state object.
"""

from __future__ import annotations
from dataclasses import replace

from flowview.state.store import ControlState, GraphState, InteractionState
from .actions import (
    Action, ResetInteraction, SetFocusedCommunity, SetGraphReady,
    SetHoveredNode, SetLayoutRunning, SetSearchQuery, SetSelectedNode,
    UpdateControls,
)


def _with_controls(state: GraphState, controls: ControlState) -> GraphState:
    if controls == state.controls:
        return state
    return replace(state, controls=controls)


def _with_interaction(state: GraphState, interaction: InteractionState) -> GraphState:
    if interaction == state.interaction:
        return state
    return replace(state, interaction=interaction)


def graph_reducer(state: GraphState, action: Action) -> GraphState:
    """Apply one action. Unknown actions leave the state unchanged."""
    if isinstance(action, UpdateControls):
        return _with_controls(state, replace(state.controls, **action.as_dict()))

    if isinstance(action, SetLayoutRunning):
        return _with_controls(state, replace(state.controls, layout_running=action.running))

    if isinstance(action, SetHoveredNode):
        return _with_interaction(state, replace(state.interaction, hovered_node=action.node_id))

    if isinstance(action, SetSelectedNode):
        return _with_interaction(state, replace(state.interaction, selected_node=action.node_id))

    if isinstance(action, SetSearchQuery):
        return _with_interaction(state, replace(state.interaction, search_query=action.query))

    if isinstance(action, SetFocusedCommunity):
        return _with_interaction(
            state, replace(state.interaction, focused_community=action.community_id)
        )

    if isinstance(action, SetGraphReady):
        if state.graph_ready == action.ready:
            return state
        return replace(state, graph_ready=action.ready)

    if isinstance(action, ResetInteraction):
        return _with_interaction(state, InteractionState())

    return state
