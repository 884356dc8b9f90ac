"""
Barnes-Hut Quad-Tree
====================

Spatial tree over node positions used to approximate repulsion.

A region far enough from a node (width / distance < theta) is treated as
a single body located at its center of mass. Leaves hold the actual node
indices, so near-field repulsion stays exact and can account for node
sizes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import math

MAX_DEPTH = 24
OVERLAP_REPULSION_FACTOR = 100.0


@dataclass
class Region:
    """Square cell of the tree."""
    center_x: float
    center_y: float
    width: float
    depth: int = 0
    mass: float = 0.0
    mass_center_x: float = 0.0
    mass_center_y: float = 0.0
    nodes: List[int] = field(default_factory=list)
    children: Optional[List["Region"]] = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def quadrant(self, x: float, y: float) -> int:
        index = 0
        if x >= self.center_x:
            index += 1
        if y >= self.center_y:
            index += 2
        return index

    def split(self) -> None:
        half = self.width / 2
        quarter = self.width / 4
        self.children = [
            Region(self.center_x - quarter, self.center_y - quarter, half, self.depth + 1),
            Region(self.center_x + quarter, self.center_y - quarter, half, self.depth + 1),
            Region(self.center_x - quarter, self.center_y + quarter, half, self.depth + 1),
            Region(self.center_x + quarter, self.center_y + quarter, half, self.depth + 1),
        ]


class QuadTree:
    """
    Quad-tree built once per iteration from position and mass arrays.

    Coincident points, or points that still share a cell at MAX_DEPTH,
    share a leaf instead of splitting forever.
    """

    def __init__(self, xs: Sequence[float], ys: Sequence[float], masses: Sequence[float]):
        self._xs = xs
        self._ys = ys
        self._masses = masses
        self.root = self._bounding_region()
        for index in range(len(xs)):
            self._insert(self.root, index)

    def _bounding_region(self) -> Region:
        if len(self._xs) == 0:
            return Region(0.0, 0.0, 1.0)
        min_x, max_x = min(self._xs), max(self._xs)
        min_y, max_y = min(self._ys), max(self._ys)
        width = max(max_x - min_x, max_y - min_y, 1e-6) * 1.01
        return Region((min_x + max_x) / 2, (min_y + max_y) / 2, width)

    def _insert(self, region: Region, index: int) -> None:
        x, y, m = float(self._xs[index]), float(self._ys[index]), float(self._masses[index])

        while True:
            total = region.mass + m
            region.mass_center_x = (region.mass_center_x * region.mass + x * m) / total
            region.mass_center_y = (region.mass_center_y * region.mass + y * m) / total
            region.mass = total

            if region.is_leaf:
                if not region.nodes or region.depth >= MAX_DEPTH or self._coincident(region, x, y):
                    region.nodes.append(index)
                    return
                region.split()
                for moved in region.nodes:
                    child = region.children[region.quadrant(self._xs[moved], self._ys[moved])]
                    self._insert(child, moved)
                region.nodes = []

            region = region.children[region.quadrant(x, y)]

    def _coincident(self, region: Region, x: float, y: float) -> bool:
        first = region.nodes[0]
        return self._xs[first] == x and self._ys[first] == y

    def repulsion(
        self,
        index: int,
        theta: float,
        coefficient: float,
        sizes: Optional[Sequence[float]] = None
    ) -> Tuple[float, float]:
        """
        Total repulsive force on node `index` as (fx, fy).

        Far regions contribute coefficient * m_i * M / d along the line
        from their mass center. Leaves are resolved node by node; when
        `sizes` is given, overlapping nodes push much harder.
        """
        x, y, m = float(self._xs[index]), float(self._ys[index]), float(self._masses[index])
        fx = fy = 0.0
        stack = [self.root]

        while stack:
            region = stack.pop()
            if region.mass == 0.0:
                continue

            if region.is_leaf:
                for other in region.nodes:
                    if other == index:
                        continue
                    gx, gy = _pair_repulsion(
                        x - float(self._xs[other]),
                        y - float(self._ys[other]),
                        coefficient * m * float(self._masses[other]),
                        None if sizes is None else float(sizes[index]) + float(sizes[other]),
                    )
                    fx += gx
                    fy += gy
                continue

            dx = x - region.mass_center_x
            dy = y - region.mass_center_y
            distance = math.sqrt(dx * dx + dy * dy)
            if distance > 0 and region.width / distance < theta:
                factor = coefficient * m * region.mass / (distance * distance)
                fx += dx * factor
                fy += dy * factor
            else:
                stack.extend(region.children)

        return fx, fy


def _pair_repulsion(dx: float, dy: float, strength: float, reach: Optional[float]) -> Tuple[float, float]:
    """Repulsion between two bodies `strength` apart by (dx, dy)."""
    distance = math.sqrt(dx * dx + dy * dy)
    if distance == 0.0:
        return 0.0, 0.0
    if reach is not None:
        gap = distance - reach
        if gap < 0:
            factor = OVERLAP_REPULSION_FACTOR * strength / distance
        elif gap > 0:
            factor = strength / (gap * distance)
        else:
            return 0.0, 0.0
    else:
        factor = strength / (distance * distance)
    return dx * factor, dy * factor
