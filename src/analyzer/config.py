"""Bottleneck heuristic configuration.

The defaults below are the reference values; the scorer output is only
comparable across runs when they are unchanged.  ``load_config`` reads an
optional YAML file with the same section names:

    thresholds:  queue_high_level_pct, queue_growth_streak_days, ...
    scoring:     queue_avg_level_weight, ..., process_upstream_growth_weight
    heuristics:  high_level_fraction, persistence_growth, plateau_cv, ...
    overrides:   {<scenario>: {queues: [...], processes: [...]}}
    scenarios:   [standard, custom]

Missing keys fall back to the defaults; unknown keys are logged and ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any

from src.shared.config_loader import load_yaml

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Thresholds:
    queue_high_level_pct: float = 0.5
    queue_growth_streak_days: int = 20
    queue_days_above_threshold_pct: float = 0.5
    process_high_utilization: float = 0.9
    process_capacity_days_pct: float = 0.5


@dataclass(frozen=True, slots=True)
class Weights:
    # queue weights sum to 1.0; process weights cap at 0.8 (plateau is halved)
    queue_avg_level_weight: float = 0.3
    queue_growth_streak_weight: float = 0.2
    queue_days_above_weight: float = 0.3
    queue_persistence_weight: float = 0.2
    process_utilization_weight: float = 0.3
    process_capacity_days_weight: float = 0.3
    process_upstream_growth_weight: float = 0.4


@dataclass(frozen=True, slots=True)
class Heuristics:
    high_level_fraction: float = 0.8  # of max level: "above threshold" and queue window
    persistence_growth: float = 1.2  # second-half mean must exceed first-half mean by 20%
    plateau_cv: float = 0.15
    plateau_factor: float = 0.5  # applied to process_upstream_growth_weight
    capacity_utilization: float = 0.95


@dataclass(frozen=True, slots=True)
class MetricOverrides:
    """Keys force-included for a scenario when present in any day record."""

    queues: tuple[str, ...] = ()
    processes: tuple[str, ...] = ()


NO_OVERRIDES = MetricOverrides()

DEFAULT_OVERRIDES: Mapping[str, MetricOverrides] = MappingProxyType({
    "custom": MetricOverrides(
        queues=(
            "custom_queue_2_level_first_pass",
            "custom_queue_2_level_second_pass",
        ),
        processes=(
            "custom_station_2_output_first_pass",
            "custom_deliveries_deliveries",
        ),
    ),
})

DEFAULT_SCENARIOS: tuple[str, ...] = ("standard", "custom")


@dataclass(frozen=True, slots=True)
class BottleneckConfig:
    thresholds: Thresholds = field(default_factory=Thresholds)
    scoring: Weights = field(default_factory=Weights)
    heuristics: Heuristics = field(default_factory=Heuristics)
    overrides: Mapping[str, MetricOverrides] = field(default_factory=lambda: DEFAULT_OVERRIDES)
    scenarios: tuple[str, ...] = DEFAULT_SCENARIOS

    def overrides_for(self, scenario: str) -> MetricOverrides:
        return self.overrides.get(scenario, NO_OVERRIDES)


DEFAULT_CONFIG = BottleneckConfig()


def _build_section(cls: type, data: Mapping[str, Any] | None, section: str) -> Any:
    data = data or {}
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        log.warning("Unknown keys in config section '%s' ignored: %s", section, ", ".join(unknown))
    return cls(**{k: v for k, v in data.items() if k in known})


def _build_overrides(data: Mapping[str, Any] | None) -> Mapping[str, MetricOverrides]:
    if data is None:
        return DEFAULT_OVERRIDES
    result: dict[str, MetricOverrides] = {}
    for scenario, cfg in data.items():
        cfg = cfg or {}
        result[str(scenario)] = MetricOverrides(
            queues=tuple(cfg.get("queues", ())),
            processes=tuple(cfg.get("processes", ())),
        )
    return MappingProxyType(result)


def config_from_dict(cfg: Mapping[str, Any]) -> BottleneckConfig:
    """Build a BottleneckConfig from a parsed YAML mapping."""
    known = {"thresholds", "scoring", "heuristics", "overrides", "scenarios"}
    unknown = sorted(set(cfg) - known)
    if unknown:
        log.warning("Unknown config sections ignored: %s", ", ".join(unknown))

    scenarios = cfg.get("scenarios")
    return BottleneckConfig(
        thresholds=_build_section(Thresholds, cfg.get("thresholds"), "thresholds"),
        scoring=_build_section(Weights, cfg.get("scoring"), "scoring"),
        heuristics=_build_section(Heuristics, cfg.get("heuristics"), "heuristics"),
        overrides=_build_overrides(cfg.get("overrides")),
        scenarios=tuple(scenarios) if scenarios is not None else DEFAULT_SCENARIOS,
    )


def load_config(path: str | Path | None = None) -> BottleneckConfig:
    """Load the heuristic config from *path*, or the defaults when None."""
    if path is None:
        return DEFAULT_CONFIG
    cfg = config_from_dict(load_yaml(path))
    log.info("Loaded bottleneck config from %s (scenarios: %s)", path, ", ".join(cfg.scenarios))
    return cfg
