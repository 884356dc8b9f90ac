"""
Interaction Contracts

Responsibility:
Define every state transition the view accepts.
No execution logic - just pure intent modeling. The reducer interprets.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional, Tuple, Union

from flowview.state.store import ControlState


class ActionType(Enum):
    """Tags of the Action union."""
    # Controls
    UPDATE_CONTROLS = "UPDATE_CONTROLS"
    SET_LAYOUT_RUNNING = "SET_LAYOUT_RUNNING"

    # Pointer / selection
    SET_HOVERED_NODE = "SET_HOVERED_NODE"
    SET_SELECTED_NODE = "SET_SELECTED_NODE"

    # Search / focus
    SET_SEARCH_QUERY = "SET_SEARCH_QUERY"
    SET_FOCUSED_COMMUNITY = "SET_FOCUSED_COMMUNITY"

    # Lifecycle
    SET_GRAPH_READY = "SET_GRAPH_READY"
    RESET_INTERACTION = "RESET_INTERACTION"


@dataclass(frozen=True)
class UpdateControls:
    """Partial update of the controls slice."""
    action_type: ClassVar[ActionType] = ActionType.UPDATE_CONTROLS
    changes: Tuple[Tuple[str, Any], ...]

    def __post_init__(self):
        unknown = {name for name, _ in self.changes} - ControlState.field_names()
        if unknown:
            raise ValueError(f"Unknown control fields: {sorted(unknown)}")

    @classmethod
    def of(cls, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> UpdateControls:
        merged = dict(changes or {})
        merged.update(kwargs)
        return cls(changes=tuple(sorted(merged.items())))

    def as_dict(self) -> dict:
        return dict(self.changes)


@dataclass(frozen=True)
class SetHoveredNode:
    action_type: ClassVar[ActionType] = ActionType.SET_HOVERED_NODE
    node_id: Optional[str]


@dataclass(frozen=True)
class SetSelectedNode:
    action_type: ClassVar[ActionType] = ActionType.SET_SELECTED_NODE
    node_id: Optional[str]


@dataclass(frozen=True)
class SetSearchQuery:
    action_type: ClassVar[ActionType] = ActionType.SET_SEARCH_QUERY
    query: str


@dataclass(frozen=True)
class SetFocusedCommunity:
    action_type: ClassVar[ActionType] = ActionType.SET_FOCUSED_COMMUNITY
    community_id: Optional[int]


@dataclass(frozen=True)
class SetLayoutRunning:
    action_type: ClassVar[ActionType] = ActionType.SET_LAYOUT_RUNNING
    running: bool


@dataclass(frozen=True)
class SetGraphReady:
    action_type: ClassVar[ActionType] = ActionType.SET_GRAPH_READY
    ready: bool


@dataclass(frozen=True)
class ResetInteraction:
    action_type: ClassVar[ActionType] = ActionType.RESET_INTERACTION


Action = Union[
    UpdateControls,
    SetHoveredNode,
    SetSelectedNode,
    SetSearchQuery,
    SetFocusedCommunity,
    SetLayoutRunning,
    SetGraphReady,
    ResetInteraction,
]
