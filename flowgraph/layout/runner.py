"""
Layout Runner
=============

Owns the ForceAtlas2 engine of one TransferGraph and exposes the two
invocation modes the view needs:

- stabilize(iterations): synchronous, bounded, blocks the caller.
- start() / stop(): a cancelable background thread that keeps iterating
  until stopped.

STATE MACHINE:
==============
IDLE -> RUNNING -> IDLE, via stop(), via reaching `max_iterations`, or via
an engine failure. Failures are logged and never propagated; positions
stay at the last finite iteration.

At most one background run exists per runner. start() while running, or
on an empty or invalidated graph, is a no-op. stop() while idle is a
no-op.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional
import logging
import threading

from ..contracts.base import LayoutStatus
from ..contracts.errors import LayoutComputationError
from ..core.model import TransferGraph
from .forceatlas2 import ForceAtlas2, ForceAtlas2Settings, total_edge_overlap

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Iteration counts and pacing of the layout runner."""
    initial_iterations: int = 50
    stabilize_iterations: int = 100
    iterations_per_tick: int = 1
    tick_interval_seconds: float = 0.016
    max_iterations: Optional[int] = None
    join_timeout_seconds: float = 2.0


class LayoutRunner:
    """Synchronous and background ForceAtlas2 runs over one graph."""

    def __init__(
        self,
        graph: TransferGraph,
        settings: Optional[ForceAtlas2Settings] = None,
        config: Optional[LayoutConfig] = None,
        on_start: Optional[Callable[[], None]] = None,
        on_stop: Optional[Callable[[], None]] = None,
    ):
        self._graph = graph
        self._settings = settings or ForceAtlas2Settings()
        self._config = config or LayoutConfig()
        self._on_start = on_start
        self._on_stop = on_stop

        self._engine: Optional[ForceAtlas2] = None
        self._status = LayoutStatus.IDLE
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._state_lock = threading.Lock()
        self._step_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> TransferGraph:
        return self._graph

    @property
    def status(self) -> LayoutStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is LayoutStatus.RUNNING

    @property
    def iterations(self) -> int:
        return self._engine.iterations if self._engine else 0

    def _can_run(self) -> bool:
        return self._graph.order > 0 and self._graph.is_live

    def _get_engine(self) -> ForceAtlas2:
        if self._engine is None:
            self._engine = ForceAtlas2(self._graph, self._settings)
        return self._engine

    # -------------------------------------------------------------------------
    # Synchronous mode
    # -------------------------------------------------------------------------

    def stabilize(self, iterations: Optional[int] = None) -> bool:
        """
        Run a fixed number of iterations before returning.

        Returns False when nothing ran or the engine failed.
        """
        if iterations is None:
            iterations = self._config.stabilize_iterations
        if iterations <= 0 or not self._can_run():
            return False

        with self._step_lock:
            engine = self._get_engine()
            try:
                engine.run(iterations)
            except LayoutComputationError as exc:
                logger.error("Layout stabilization stopped early: %s", exc)
                return False
            except Exception:
                logger.exception("Layout stabilization error")
                return False

        logger.debug(
            "Stabilized %d nodes for %d iterations, edge overlap %.2f",
            self._graph.order, iterations, total_edge_overlap(self._graph),
        )
        return True

    # -------------------------------------------------------------------------
    # Background mode
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """Launch the background run. Returns True only if a run was started."""
        with self._state_lock:
            if self.is_running or not self._can_run():
                return False
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run_loop,
                args=(self._stop_event,),
                name="forceatlas2-layout",
                daemon=True,
            )
            self._status = LayoutStatus.RUNNING
            self._thread.start()

        logger.info("Started layout on %d nodes", self._graph.order)
        if self._on_start:
            self._on_start()
        return True

    def stop(self) -> bool:
        """
        Stop the background run and wait for its current iteration.

        Returns True only if a run was stopped.
        """
        with self._state_lock:
            if not self.is_running:
                return False
            self._stop_event.set()
            thread = self._thread
            self._status = LayoutStatus.IDLE

        if thread is not None and thread is not threading.current_thread():
            thread.join(self._config.join_timeout_seconds)

        logger.info("Stopped layout after %d iterations", self.iterations)
        if self._on_stop:
            self._on_stop()
        return True

    def kill(self) -> None:
        """Stop any run and drop the engine. Used before the graph is replaced."""
        self.stop()
        self._engine = None
        self._thread = None

    def _run_loop(self, stop_event: threading.Event) -> None:
        cfg = self._config
        engine = self._get_engine()
        failed = False

        try:
            while not stop_event.is_set():
                if not self._graph.is_live:
                    break
                if cfg.max_iterations is not None and engine.iterations >= cfg.max_iterations:
                    break
                with self._step_lock:
                    if stop_event.is_set():
                        break
                    engine.run(cfg.iterations_per_tick)
                stop_event.wait(cfg.tick_interval_seconds)
        except Exception:
            failed = True
            logger.exception("Layout run failed, keeping last positions")

        self._finish(stop_event, failed)

    def _finish(self, stop_event: threading.Event, failed: bool) -> None:
        """Return to IDLE when the loop ends on its own."""
        with self._state_lock:
            if stop_event.is_set() or self._stop_event is not stop_event:
                return
            stop_event.set()
            self._status = LayoutStatus.IDLE

        if not failed:
            logger.info("Layout settled after %d iterations", self.iterations)
        if self._on_stop:
            self._on_stop()
