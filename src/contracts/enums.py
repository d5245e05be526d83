"""Canonical enumerations for the bottleneck contracts."""

from __future__ import annotations

from enum import Enum


class BottleneckType(str, Enum):
    QUEUE = "queue"
    PROCESS = "process"
    NONE = "none"


class MetricKind(str, Enum):
    """Naming-convention suffix that marks a metric key as a candidate."""

    QUEUE = "_level"
    PROCESS = "_output"
