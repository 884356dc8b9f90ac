"""
Size/Scale Encoder

Maps a node metric to a visual radius, normalized against the largest
value in the graph. Re-running with any metric/scale only overwrites
`size`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math

from ..contracts.base import Metric, ScaleType
from .model import TransferGraph


@dataclass
class SizeConfig:
    """Bounds of the node radius."""
    min_size: float = 4.0
    max_size: float = 25.0


class SizeEncoder:
    """Compute node sizes from a metric and a scale transform."""

    def __init__(self, config: Optional[SizeConfig] = None):
        self._config = config or SizeConfig()

    def normalize(self, value: float, max_value: float, scale: ScaleType) -> float:
        if scale is ScaleType.LOG:
            return math.log10(value + 1) / math.log10(max_value + 1)
        return value / max_value

    def apply(
        self,
        graph: TransferGraph,
        metric: Metric | str = Metric.VOLUME,
        scale: ScaleType | str = ScaleType.LOG
    ) -> None:
        metric = Metric.parse(metric)
        scale = ScaleType.parse(scale)
        if graph.order == 0:
            return

        # floor of 1 keeps an all-zero graph at min_size
        max_value = max(max(node.metric_value(metric) for node in graph.nodes()), 1)
        span = self._config.max_size - self._config.min_size

        for node in graph.nodes():
            normalized = self.normalize(node.metric_value(metric), max_value, scale)
            node.size = self._config.min_size + normalized * span
