"""
Graph Session
=============

Single owner of the live TransferGraph and of the view state around it.

PIPELINE:
=========
1. Payload: validated GraphPayload (dict or JSON accepted)
2. Node cap: keep the top `max_nodes` addresses by the chosen metric
3. Builder: TransferGraph with placement, weights and edge filters
4. Community overlay: cluster ids and colors, via lookup or payload
5. Size encoder: node radius from metric and scale
6. Layout: initial synchronous stabilization, then on-demand runs

Control changes that alter the roster or edge set rebuild the graph from
the stored payload. A scale change only re-encodes sizes. Interaction
changes never touch the graph; they only change what
visual_overrides() returns.

THREADING:
==========
State transitions are serialized by a reentrant lock. The background
layout thread writes positions only; it reaches the state solely through
the start/stop callbacks, which are ignored once their runner is
replaced.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Union
import json
import logging
import os
import threading

from flowgraph.contracts.base import Metric
from flowgraph.contracts.payload import GraphPayload
from flowgraph.core.builder import BuilderConfig, GraphBuilder
from flowgraph.core.communities import ClusterAssignmentCache, CommunityOverlay
from flowgraph.core.model import TransferGraph
from flowgraph.core.sizing import SizeConfig, SizeEncoder
from flowgraph.layout.forceatlas2 import ForceAtlas2Settings
from flowgraph.layout.runner import LayoutConfig, LayoutRunner

from .inspection import (
    LegendEntry, NodeDetails, NodeTooltip, build_legend, build_node_details, build_tooltip
)
from .interaction.actions import (
    Action, SetGraphReady, SetLayoutRunning, SetSearchQuery, SetSelectedNode
)
from .interaction.reducer import graph_reducer
from .interaction.search import SearchResolver, SearchResult
from .state.store import GraphState, INITIAL_GRAPH_STATE
from .visualization.overrides import VisualOverrides, compute_visual_overrides

logger = logging.getLogger(__name__)

PayloadSource = Union[GraphPayload, Mapping[str, Any], str, bytes]
ClusterLookup = Callable[[GraphPayload], Mapping[str, int]]

ENV_PREFIX = "FLOWGRAPH_"

# Controls whose change alters which nodes and edges exist
_STRUCTURAL_CONTROLS = ("metric", "min_edge_weight", "hide_isolated", "max_nodes")


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class SessionConfig:
    """Unified configuration for one graph session."""
    builder: BuilderConfig = None
    sizing: SizeConfig = None
    physics: ForceAtlas2Settings = None
    layout: LayoutConfig = None

    def __post_init__(self):
        self.builder = self.builder or BuilderConfig()
        self.sizing = self.sizing or SizeConfig()
        self.physics = self.physics or ForceAtlas2Settings()
        self.layout = self.layout or LayoutConfig()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> SessionConfig:
        """
        Defaults overridden by FLOWGRAPH_* variables.

        Recognized: INITIAL_ITERATIONS, STABILIZE_ITERATIONS,
        TICK_INTERVAL_SECONDS, BARNES_HUT_THETA, GRAVITY, SCALING_RATIO,
        MIN_NODE_SIZE, MAX_NODE_SIZE. Malformed values raise ValueError.
        """
        env = os.environ if environ is None else environ

        def read(name: str, cast: Callable[[str], Any], default: Any) -> Any:
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return cast(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from None

        layout = LayoutConfig()
        physics = ForceAtlas2Settings()
        sizing = SizeConfig()

        layout.initial_iterations = read("INITIAL_ITERATIONS", int, layout.initial_iterations)
        layout.stabilize_iterations = read("STABILIZE_ITERATIONS", int, layout.stabilize_iterations)
        layout.tick_interval_seconds = read(
            "TICK_INTERVAL_SECONDS", float, layout.tick_interval_seconds
        )
        physics.barnes_hut_theta = read("BARNES_HUT_THETA", float, physics.barnes_hut_theta)
        physics.gravity = read("GRAVITY", float, physics.gravity)
        physics.scaling_ratio = read("SCALING_RATIO", float, physics.scaling_ratio)
        sizing.min_size = read("MIN_NODE_SIZE", float, sizing.min_size)
        sizing.max_size = read("MAX_NODE_SIZE", float, sizing.max_size)

        return cls(sizing=sizing, physics=physics, layout=layout)


def cap_nodes(payload: GraphPayload, max_nodes: int, metric: Metric) -> GraphPayload:
    """Keep the `max_nodes` heaviest roster entries. Ties keep roster order."""
    if len(payload.nodes) <= max_nodes:
        return payload

    def value(record) -> float:
        return record.total_tx_count if metric is Metric.TX_COUNT else record.total_volume

    kept = sorted(payload.nodes, key=value, reverse=True)[:max_nodes]
    return payload.model_copy(update={"nodes": kept})


# =============================================================================
# SESSION
# =============================================================================

class GraphSession:
    """
    Orchestrates build, overlay, encoding, layout and interaction.

    Usage:
        session = GraphSession()
        session.load(payload)
        session.dispatch(SetHoveredNode("0xabc..."))
        overrides = session.visual_overrides()
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        cluster_lookup: Optional[ClusterLookup] = None,
        on_node_found: Optional[Callable[[str], None]] = None,
        cluster_cache: Optional[ClusterAssignmentCache] = None,
    ):
        self._config = config or SessionConfig()
        self._cluster_lookup = cluster_lookup
        self._on_node_found = on_node_found
        self._cluster_cache = cluster_cache or ClusterAssignmentCache()

        self._overlay = CommunityOverlay()
        self._encoder = SizeEncoder(self._config.sizing)
        self._resolver = SearchResolver()

        self._state: GraphState = INITIAL_GRAPH_STATE
        self._payload: Optional[GraphPayload] = None
        self._raw_export: Optional[str] = None
        self._graph: Optional[TransferGraph] = None
        self._runner: Optional[LayoutRunner] = None
        self._community_counts: Counter = Counter()
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def state(self) -> GraphState:
        return self._state

    @property
    def graph(self) -> Optional[TransferGraph]:
        return self._graph

    @property
    def payload(self) -> Optional[GraphPayload]:
        return self._payload

    @property
    def community_counts(self) -> Counter:
        return Counter(self._community_counts)

    @property
    def cluster_cache(self) -> ClusterAssignmentCache:
        return self._cluster_cache

    @property
    def is_layout_running(self) -> bool:
        return self._runner is not None and self._runner.is_running

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, source: Optional[PayloadSource]) -> Optional[TransferGraph]:
        """
        Replace the current graph with one built from `source`.

        Returns None for a missing or empty payload. Raises
        pydantic.ValidationError for a malformed one, after the previous
        graph has already been torn down.
        """
        with self._lock:
            self._teardown_graph()
            if source is None:
                self._payload = None
                self._raw_export = None
                return None

            self._payload = self._parse(source)
            self._raw_export = self._export_text(source, self._payload)
            return self._rebuild()

    def _parse(self, source: PayloadSource) -> GraphPayload:
        if isinstance(source, GraphPayload):
            return source
        if isinstance(source, (str, bytes)):
            return GraphPayload.from_json(source)
        return GraphPayload.model_validate(source)

    def _export_text(self, source: PayloadSource, payload: GraphPayload) -> str:
        if isinstance(source, bytes):
            return source.decode("utf-8")
        if isinstance(source, str):
            return source
        if isinstance(source, GraphPayload):
            return payload.to_json()
        return json.dumps(source, indent=2)

    def _rebuild(self) -> Optional[TransferGraph]:
        self._teardown_graph()
        payload = self._payload
        if payload is None or payload.is_empty:
            logger.info("No graph data to build")
            return None

        controls = self._state.controls
        builder = GraphBuilder(replace(
            self._config.builder,
            min_edge_weight=controls.min_edge_weight,
            hide_isolated=controls.hide_isolated,
        ))
        graph = builder.build(cap_nodes(payload, controls.max_nodes, controls.metric), controls.metric)

        if self._cluster_lookup is not None:
            self._community_counts = self._overlay.apply_from_lookup(
                graph, lambda: self._load_clusters(payload)
            )
        else:
            self._community_counts = self._overlay.apply(graph, payload.cluster_assignments())

        self._encoder.apply(graph, controls.metric, controls.scale)

        runner = LayoutRunner(
            graph,
            self._config.physics,
            self._config.layout,
            on_start=lambda: self._on_runner_change(runner, True),
            on_stop=lambda: self._on_runner_change(runner, False),
        )
        self._graph = graph
        self._runner = runner

        runner.stabilize(self._config.layout.initial_iterations)
        logger.info(
            "Built graph with %d nodes, %d edges, %d communities",
            graph.order, graph.size, len(self._community_counts),
        )
        self.dispatch(SetGraphReady(True))
        return graph

    def _load_clusters(self, payload: GraphPayload) -> Mapping[str, int]:
        meta = payload.meta
        key = (meta.week_start, meta.token, meta.chain, meta.tier)
        return self._cluster_cache.get_or_load(key, lambda: self._cluster_lookup(payload))

    def _teardown_graph(self) -> None:
        if self._runner is not None:
            self._runner.kill()
            self._runner = None
        if self._graph is not None:
            self._graph.invalidate()
            self._graph = None
        self._community_counts = Counter()
        self.dispatch(SetGraphReady(False))

    def _on_runner_change(self, runner: LayoutRunner, running: bool) -> None:
        if runner is not self._runner:
            return
        self.dispatch(SetLayoutRunning(running))

    def teardown(self) -> None:
        """Stop layout and release the graph."""
        with self._lock:
            self._teardown_graph()

    # -------------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------------

    def dispatch(self, action: Action) -> GraphState:
        """Apply an action, then rebuild or re-encode if controls require it."""
        with self._lock:
            previous = self._state
            self._state = graph_reducer(previous, action)
            current = self._state
            if current.controls is previous.controls or self._payload is None:
                return current

            before, after = previous.controls, current.controls
            if any(getattr(before, name) != getattr(after, name) for name in _STRUCTURAL_CONTROLS):
                self._rebuild()
            elif before.scale != after.scale and self._graph is not None:
                self._encoder.apply(self._graph, after.metric, after.scale)
            return self._state

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def start_layout(self) -> bool:
        runner = self._runner
        return runner.start() if runner is not None else False

    def stop_layout(self) -> bool:
        runner = self._runner
        return runner.stop() if runner is not None else False

    def stabilize(self, iterations: Optional[int] = None) -> bool:
        runner = self._runner
        if runner is None:
            return False
        if iterations is None:
            iterations = self._config.layout.stabilize_iterations
        return runner.stabilize(iterations)

    # -------------------------------------------------------------------------
    # Search and views
    # -------------------------------------------------------------------------

    def search(self, query: Optional[str] = None) -> SearchResult:
        """
        Resolve `query` (or the stored query) and select the match.

        A miss leaves the selection unchanged.
        """
        if query is not None:
            self.dispatch(SetSearchQuery(query))
        result = self._resolver.resolve(self._state.interaction.search_query, self._graph)
        if result.found:
            self.dispatch(SetSelectedNode(result.node_id))
            if self._on_node_found:
                self._on_node_found(result.node_id)
        return result

    def visual_overrides(self) -> VisualOverrides:
        return compute_visual_overrides(self._state, self._graph)

    def node_details(self, node_id: Optional[str] = None) -> Optional[NodeDetails]:
        """Details of `node_id`, defaulting to the selected node."""
        if node_id is None:
            node_id = self._state.interaction.selected_node
        return build_node_details(self._graph, node_id)

    def tooltip(self, node_id: Optional[str] = None) -> Optional[NodeTooltip]:
        """Tooltip of `node_id`, defaulting to the hovered node."""
        if node_id is None:
            node_id = self._state.interaction.hovered_node
        return build_tooltip(self._graph, node_id)

    def legend(self) -> List[LegendEntry]:
        return build_legend(self._graph, self._state.interaction.focused_community)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export(self) -> Optional[str]:
        """The loaded payload exactly as received. Layout is not included."""
        return self._raw_export

    def export_filename(self) -> str:
        week = self._payload.meta.week_start if self._payload else None
        return f"graph-{week or 'unknown'}.json"

    def export_to(self, directory: str) -> Optional[str]:
        """Write the export into `directory`. Returns the file path."""
        text = self.export()
        if text is None:
            return None
        path = os.path.join(directory, self.export_filename())
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(text)
        return path
