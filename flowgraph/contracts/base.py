"""
Base Contracts and Shared Types

Enumerations used across the engine and the view layer.
Enum values are the exact strings the data service puts on the wire.
"""

from __future__ import annotations
from enum import Enum


class Metric(Enum):
    """Which aggregate drives edge weight and node size."""
    VOLUME = "volume"
    TX_COUNT = "txCount"

    @classmethod
    def parse(cls, value: "Metric | str") -> Metric:
        """Accept either an enum member or its wire string."""
        if isinstance(value, cls):
            return value
        return cls(value)


class ScaleType(Enum):
    """Transform applied before normalizing node sizes."""
    LINEAR = "linear"
    LOG = "log"

    @classmethod
    def parse(cls, value: "ScaleType | str") -> ScaleType:
        if isinstance(value, cls):
            return value
        return cls(value)


class LayoutStatus(Enum):
    """
    Lifecycle of a background layout run.

    IDLE -> RUNNING -> IDLE, whether the run ends by stop() or by an
    engine failure.
    """
    IDLE = "idle"
    RUNNING = "running"
