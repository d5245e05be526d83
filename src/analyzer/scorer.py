"""Bottleneck Scorer — features → BottleneckVerdict.

Each candidate type has an ordered list of ``ScoringRule``s.  A rule adds
its weight when its predicate holds; the sum is clipped to 1.0.

Queue rules (weights sum to 1.0)
────────────────────────────────
  avg_level       averageLevel / maxLevel >= queue_high_level_pct
  growth_streak   growthStreak >= queue_growth_streak_days
  days_above      daysAboveThreshold / totalDays >= queue_days_above_threshold_pct
  persistence     mean(second half) > mean(first half) * persistence_growth

Process rules (cap 0.8: the plateau weight is halved)
─────────────────────────────────────────────────────
  utilization     utilizationRate >= process_high_utilization
  capacity_days   daysAtCapacity / totalDays >= process_capacity_days_pct
  plateau         stddev / mean of the second half < plateau_cv

Selection pools queues then processes, sorts by confidence (stable, so the
first-discovered candidate wins ties) and infers the critical window of
the winner.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.analyzer.config import DEFAULT_CONFIG, BottleneckConfig
from src.analyzer.extractor import mean
from src.contracts.enums import BottleneckType
from src.contracts.features import ProcessFeature, QueueFeature
from src.contracts.verdict import BottleneckVerdict, TimeWindow

log = logging.getLogger(__name__)

F = TypeVar("F", QueueFeature, ProcessFeature)


@dataclass(frozen=True, slots=True)
class ScoringRule(Generic[F]):
    name: str
    applies: Callable[[F, BottleneckConfig], bool]
    weight: Callable[[BottleneckConfig], float]


@dataclass(frozen=True, slots=True)
class Candidate:
    feature: QueueFeature | ProcessFeature
    type: BottleneckType
    confidence: float
    matched: tuple[str, ...] = ()


def _ratio(num: float, den: float) -> float | None:
    return num / den if den else None


def _at_least(value: float | None, threshold: float) -> bool:
    return value is not None and value >= threshold


# ═══════════════════════════════════════════════════════════════════════════
#  Queue rules
# ═══════════════════════════════════════════════════════════════════════════


def queue_high_average(q: QueueFeature, cfg: BottleneckConfig) -> bool:
    return _at_least(_ratio(q.average_level, q.max_level), cfg.thresholds.queue_high_level_pct)


def queue_long_growth(q: QueueFeature, cfg: BottleneckConfig) -> bool:
    return q.growth_streak >= cfg.thresholds.queue_growth_streak_days


def queue_mostly_high(q: QueueFeature, cfg: BottleneckConfig) -> bool:
    return _at_least(
        _ratio(q.days_above_threshold, q.total_days),
        cfg.thresholds.queue_days_above_threshold_pct,
    )


def queue_persistent(q: QueueFeature, cfg: BottleneckConfig) -> bool:
    first, second = q.time_series.halves()
    first_avg = mean(first.present())
    second_avg = mean(second.present())
    if first_avg is None or second_avg is None:
        return False
    return second_avg > first_avg * cfg.heuristics.persistence_growth


QUEUE_RULES: tuple[ScoringRule[QueueFeature], ...] = (
    ScoringRule("avg_level", queue_high_average, lambda c: c.scoring.queue_avg_level_weight),
    ScoringRule("growth_streak", queue_long_growth, lambda c: c.scoring.queue_growth_streak_weight),
    ScoringRule("days_above", queue_mostly_high, lambda c: c.scoring.queue_days_above_weight),
    ScoringRule("persistence", queue_persistent, lambda c: c.scoring.queue_persistence_weight),
)


# ═══════════════════════════════════════════════════════════════════════════
#  Process rules
# ═══════════════════════════════════════════════════════════════════════════


def process_high_utilization(p: ProcessFeature, cfg: BottleneckConfig) -> bool:
    return _at_least(p.utilization_rate, cfg.thresholds.process_high_utilization)


def process_mostly_at_capacity(p: ProcessFeature, cfg: BottleneckConfig) -> bool:
    if p.utilization_rate is None:
        return False
    return _at_least(
        _ratio(p.days_at_capacity, p.total_days),
        cfg.thresholds.process_capacity_days_pct,
    )


def coefficient_of_variation(values: Sequence[float]) -> float | None:
    """Population stddev / mean; None for no values or a zero mean."""
    avg = mean(values)
    if not avg:
        return None
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / avg


def process_plateaued(p: ProcessFeature, cfg: BottleneckConfig) -> bool:
    _, second = p.time_series.halves()
    cv = coefficient_of_variation(second.present())
    return cv is not None and cv < cfg.heuristics.plateau_cv


PROCESS_RULES: tuple[ScoringRule[ProcessFeature], ...] = (
    ScoringRule(
        "utilization", process_high_utilization, lambda c: c.scoring.process_utilization_weight
    ),
    ScoringRule(
        "capacity_days", process_mostly_at_capacity, lambda c: c.scoring.process_capacity_days_weight
    ),
    ScoringRule(
        "plateau",
        process_plateaued,
        lambda c: c.scoring.process_upstream_growth_weight * c.heuristics.plateau_factor,
    ),
)


# ═══════════════════════════════════════════════════════════════════════════
#  Scoring and selection
# ═══════════════════════════════════════════════════════════════════════════


def score(
    feature: F,
    rules: Sequence[ScoringRule[F]],
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> tuple[float, tuple[str, ...]]:
    """Sum the weights of the rules that hold, clipped to 1.0."""
    total = 0.0
    matched: list[str] = []
    for rule in rules:
        if rule.applies(feature, config):
            total += rule.weight(config)
            matched.append(rule.name)
    return min(total, 1.0), tuple(matched)


def score_candidates(
    queues: Sequence[QueueFeature],
    processes: Sequence[ProcessFeature],
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> list[Candidate]:
    """Score every feature; queues first, then processes, in discovery order."""
    candidates: list[Candidate] = []
    for q in queues:
        confidence, matched = score(q, QUEUE_RULES, config)
        candidates.append(Candidate(q, BottleneckType.QUEUE, confidence, matched))
    for p in processes:
        confidence, matched = score(p, PROCESS_RULES, config)
        candidates.append(Candidate(p, BottleneckType.PROCESS, confidence, matched))
    return candidates


def rank_candidates(candidates: Sequence[Candidate]) -> list[Candidate]:
    return sorted(candidates, key=lambda c: c.confidence, reverse=True)


def time_window(candidate: Candidate, config: BottleneckConfig = DEFAULT_CONFIG) -> TimeWindow | None:
    """Critical window of the winning candidate.

    Queue: first..last index whose value is at least ``high_level_fraction``
    of the max level.  Process with utilization data: the second half of
    the series.
    """
    feature = candidate.feature
    series = feature.time_series
    if isinstance(feature, QueueFeature):
        threshold = feature.max_level * config.heuristics.high_level_fraction
        hits = [i for i, v in enumerate(series) if v is not None and v >= threshold]
        return TimeWindow(hits[0], hits[-1]) if hits else None
    if feature.utilization_rate is not None:
        return TimeWindow(len(series) // 2, len(series) - 1)
    return None


def detect_bottleneck(
    queues: Sequence[QueueFeature],
    processes: Sequence[ProcessFeature],
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> BottleneckVerdict:
    """Pick the single most likely bottleneck among all queues and processes."""
    candidates = score_candidates(queues, processes, config)
    if not candidates:
        return BottleneckVerdict.none()

    ranked = rank_candidates(candidates)
    winner = ranked[0]
    for c in ranked:
        log.debug(
            "  candidate %-30s %-7s %.2f [%s]",
            c.feature.id, c.type.value, c.confidence, ", ".join(c.matched),
        )
    return BottleneckVerdict(
        primary_bottleneck=winner.feature.id,
        type=winner.type,
        confidence=round(winner.confidence, 2),
        time_window=time_window(winner, config),
    )
