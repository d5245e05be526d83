"""Derived per-metric statistics consumed by the scorer."""

from __future__ import annotations

from dataclasses import dataclass

from src.contracts.day_record import TimeSeries


@dataclass(frozen=True, slots=True)
class QueueFeature:
    """Work-in-progress level statistics for one queue metric."""

    id: str
    name: str
    metric_key: str
    time_series: TimeSeries
    max_level: float
    average_level: float
    growth_streak: int
    days_above_threshold: int
    total_days: int  # present values only, not len(time_series)


@dataclass(frozen=True, slots=True)
class ProcessFeature:
    """Throughput statistics for one process metric.

    ``utilization_rate`` is a 0–1 fraction, or None when the process has
    no associated workload/utilization metric.
    """

    id: str
    name: str
    metric_key: str
    time_series: TimeSeries
    max_output: float
    average_output: float
    utilization_rate: float | None
    days_at_capacity: int
    total_days: int
    utilization_key: str | None = None
