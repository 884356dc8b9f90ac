"""
ForceAtlas2 Layout
==================

Iterative force-directed placement of a TransferGraph.

FORCES PER ITERATION:
=====================
- Repulsion between every pair of nodes, proportional to the product of
  their masses (1 + degree). Barnes-Hut approximated when enabled.
- Attraction along every edge, scaled by edge weight.
- Gravity pulling every node towards the origin.
- Size adjustment: nodes repel hard while their circles overlap and stop
  attracting once they touch.

Displacement is damped per node by swinging/traction and globally by
`slow_down`, which grows with graph order so large graphs settle gently.

The engine keeps its own numpy copy of positions. It pulls x/y/size from
the graph before a run and pushes x/y back after it. Nothing else on the
graph is written.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import math

import numpy as np

from ..contracts.errors import LayoutComputationError
from ..core.model import TransferGraph
from .quadtree import OVERLAP_REPULSION_FACTOR, QuadTree


MAX_FORCE = 10.0


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class ForceAtlas2Settings:
    """Physics settings. `slow_down=None` derives it from graph order."""
    barnes_hut_optimize: bool = True
    barnes_hut_theta: float = 0.5
    gravity: float = 0.05
    scaling_ratio: float = 10.0
    strong_gravity_mode: bool = False
    adjust_sizes: bool = True
    slow_down: Optional[float] = None
    edge_weight_influence: float = 1.0
    lin_log_mode: bool = False
    outbound_attraction_distribution: bool = False


def infer_slow_down(order: int) -> float:
    return 1 + math.log(order + 1)


# =============================================================================
# ENGINE
# =============================================================================

class ForceAtlas2:
    """
    ForceAtlas2 over a fixed node/edge set.

    The node and edge lists are captured at construction; positions and
    sizes are re-read from the graph at the start of every run() so that
    changes made between runs are honored.
    """

    def __init__(self, graph: TransferGraph, settings: Optional[ForceAtlas2Settings] = None):
        self._graph = graph
        self._settings = settings or ForceAtlas2Settings()
        self._node_ids: List[str] = list(graph.node_ids())
        index = {node_id: i for i, node_id in enumerate(self._node_ids)}

        edges = list(graph.edges())
        self._sources = np.array([index[e.source] for e in edges], dtype=np.intp)
        self._targets = np.array([index[e.target] for e in edges], dtype=np.intp)
        self._weights = np.array([e.weight for e in edges], dtype=float)

        n = len(self._node_ids)
        degree = np.zeros(n)
        np.add.at(degree, self._sources, 1)
        np.add.at(degree, self._targets, 1)
        self._mass = 1.0 + degree

        self._x = np.zeros(n)
        self._y = np.zeros(n)
        self._size = np.zeros(n)
        self._dx = np.zeros(n)
        self._dy = np.zeros(n)
        self._convergence = np.ones(n)

        if self._settings.slow_down is not None:
            self._slow_down = self._settings.slow_down
        else:
            self._slow_down = infer_slow_down(n)

        self.iterations = 0

    @property
    def settings(self) -> ForceAtlas2Settings:
        return self._settings

    @property
    def slow_down(self) -> float:
        return self._slow_down

    @property
    def order(self) -> int:
        return len(self._node_ids)

    # -------------------------------------------------------------------------
    # Graph synchronisation
    # -------------------------------------------------------------------------

    def pull(self) -> None:
        """Read positions and sizes from the graph."""
        for i, node_id in enumerate(self._node_ids):
            attrs = self._graph.node(node_id)
            self._x[i] = attrs.x
            self._y[i] = attrs.y
            self._size[i] = attrs.size

    def push(self) -> bool:
        """Write positions back. Refused once the graph is invalidated."""
        if not self._graph.is_live:
            return False
        for i, node_id in enumerate(self._node_ids):
            attrs = self._graph.node(node_id)
            attrs.x = float(self._x[i])
            attrs.y = float(self._y[i])
        return True

    def run(self, iterations: int) -> int:
        """
        Pull, iterate, push.

        Positions committed are those of the last finite iteration, even
        when a later iteration raises LayoutComputationError.
        """
        if self.order == 0:
            return 0
        self.pull()
        try:
            for _ in range(iterations):
                self.iterate()
        finally:
            self.push()
        return self.iterations

    # -------------------------------------------------------------------------
    # Physics
    # -------------------------------------------------------------------------

    def iterate(self) -> None:
        """Advance one step. Raises LayoutComputationError on non-finite output."""
        n = self.order
        if n == 0:
            return

        dx = np.zeros(n)
        dy = np.zeros(n)

        self._apply_repulsion(dx, dy)
        self._apply_gravity(dx, dy)
        self._apply_attraction(dx, dy)
        new_x, new_y = self._displace(dx, dy)

        if not (np.all(np.isfinite(new_x)) and np.all(np.isfinite(new_y))):
            raise LayoutComputationError(
                f"Non-finite positions after iteration {self.iterations + 1}"
            )

        self._x, self._y = new_x, new_y
        self._dx, self._dy = dx, dy
        self.iterations += 1

    def _apply_repulsion(self, dx: np.ndarray, dy: np.ndarray) -> None:
        s = self._settings
        coefficient = s.scaling_ratio

        if s.barnes_hut_optimize:
            xs, ys, masses = self._x.tolist(), self._y.tolist(), self._mass.tolist()
            sizes = self._size.tolist() if s.adjust_sizes else None
            tree = QuadTree(xs, ys, masses)
            for i in range(self.order):
                fx, fy = tree.repulsion(i, s.barnes_hut_theta, coefficient, sizes)
                dx[i] += fx
                dy[i] += fy
            return

        x_dist = self._x[:, None] - self._x[None, :]
        y_dist = self._y[:, None] - self._y[None, :]
        distance = np.sqrt(x_dist ** 2 + y_dist ** 2)
        strength = coefficient * self._mass[:, None] * self._mass[None, :]

        with np.errstate(divide="ignore", invalid="ignore"):
            if s.adjust_sizes:
                gap = distance - (self._size[:, None] + self._size[None, :])
                factor = np.where(
                    gap < 0,
                    OVERLAP_REPULSION_FACTOR * strength / distance,
                    np.where(gap > 0, strength / (gap * distance), 0.0),
                )
            else:
                factor = strength / (distance * distance)
        factor[distance == 0] = 0.0

        dx += np.sum(x_dist * factor, axis=1)
        dy += np.sum(y_dist * factor, axis=1)

    def _apply_gravity(self, dx: np.ndarray, dy: np.ndarray) -> None:
        s = self._settings
        if s.strong_gravity_mode:
            factor = s.gravity * self._mass
        else:
            distance = np.sqrt(self._x ** 2 + self._y ** 2)
            with np.errstate(divide="ignore", invalid="ignore"):
                factor = np.where(distance > 0, s.gravity * self._mass / distance, 0.0)
        dx -= self._x * factor
        dy -= self._y * factor

    def _apply_attraction(self, dx: np.ndarray, dy: np.ndarray) -> None:
        if len(self._sources) == 0:
            return
        s = self._settings
        src, tgt = self._sources, self._targets

        coefficient = 1.0
        if s.outbound_attraction_distribution:
            coefficient = float(np.mean(self._mass))

        ewc = np.power(self._weights, s.edge_weight_influence)

        x_dist = self._x[src] - self._x[tgt]
        y_dist = self._y[src] - self._y[tgt]
        distance = np.sqrt(x_dist ** 2 + y_dist ** 2)

        with np.errstate(divide="ignore", invalid="ignore"):
            if s.adjust_sizes:
                gap = distance - self._size[src] - self._size[tgt]
                if s.lin_log_mode:
                    factor = np.where(gap > 0, -coefficient * ewc * np.log1p(gap) / gap, 0.0)
                else:
                    factor = np.where(gap > 0, -coefficient * ewc, 0.0)
            elif s.lin_log_mode:
                factor = np.where(
                    distance > 0, -coefficient * ewc * np.log1p(distance) / distance, 0.0
                )
            else:
                factor = -coefficient * ewc

        if s.outbound_attraction_distribution:
            factor = factor / self._mass[src]

        fx = x_dist * factor
        fy = y_dist * factor
        np.add.at(dx, src, fx)
        np.add.at(dy, src, fy)
        np.add.at(dx, tgt, -fx)
        np.add.at(dy, tgt, -fy)

    def _displace(self, dx: np.ndarray, dy: np.ndarray):
        s = self._settings

        if s.adjust_sizes:
            force = np.sqrt(dx ** 2 + dy ** 2)
            with np.errstate(divide="ignore", invalid="ignore"):
                cap = np.where(force > MAX_FORCE, MAX_FORCE / force, 1.0)
            dx *= cap
            dy *= cap

        swinging = self._mass * np.sqrt((self._dx - dx) ** 2 + (self._dy - dy) ** 2)
        traction = np.sqrt((self._dx + dx) ** 2 + (self._dy + dy) ** 2) / 2

        if s.adjust_sizes:
            speed = 0.1 * np.log1p(traction) / (1 + np.sqrt(swinging))
        else:
            speed = self._convergence * np.log1p(traction) / (1 + np.sqrt(swinging))
            self._convergence = np.minimum(
                1.0, np.sqrt(speed * (dx ** 2 + dy ** 2) / (1 + np.sqrt(swinging)))
            )

        step = speed / self._slow_down
        return self._x + dx * step, self._y + dy * step


# =============================================================================
# DIAGNOSTICS
# =============================================================================

def total_edge_overlap(graph: TransferGraph) -> float:
    """Sum over edges of how far the endpoint circles overlap."""
    total = 0.0
    for edge in graph.edges():
        if edge.source == edge.target:
            continue
        a = graph.node(edge.source)
        b = graph.node(edge.target)
        distance = math.hypot(a.x - b.x, a.y - b.y)
        total += max(0.0, a.size + b.size - distance)
    return total
