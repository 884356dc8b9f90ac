"""
Transfer Network View Layer

UI-facing state for the interactive transfer graph: controls, hover and
selection, search and community focus, and the per-node/per-edge visual
overrides derived from them.

PRINCIPLES:
1. State values are immutable (frozen dataclasses)
2. Transitions are a pure reducer: (GraphState, Action) -> GraphState
3. Overrides are computed from state + graph and never written back
4. Stale node ids are treated as absent, never as errors
"""
