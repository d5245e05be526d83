"""Metric Extractor — DayRecords → QueueFeature / ProcessFeature.

Discovery is two-pass:

  1. candidate keys come from the first day record by suffix
     (``_level`` → queue, ``_output`` → process);
  2. scenario override keys are added when any day record carries them,
     so a key missing on day 0 but present later is still picked up.

Statistics skip absent values; the time series keeps every slot so that
it stays index-aligned with the loaded days.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from src.analyzer.config import DEFAULT_CONFIG, BottleneckConfig
from src.contracts.day_record import DayRecord, TimeSeries
from src.contracts.enums import MetricKind
from src.contracts.features import ProcessFeature, QueueFeature

log = logging.getLogger(__name__)

UTILIZATION_MARKERS = ("workload", "utilization", "%")


# ═══════════════════════════════════════════════════════════════════════════
#  Key discovery
# ═══════════════════════════════════════════════════════════════════════════


def discover_keys(record: DayRecord, kind: MetricKind) -> list[str]:
    """Keys of *record* that end with the suffix of *kind*, in record order."""
    return [key for key in record.metrics if key.endswith(kind.value)]


def merge_metric_keys(
    detected: Iterable[str],
    override_keys: Iterable[str],
    records: Sequence[DayRecord],
) -> list[str]:
    """Append override keys present in at least one record, without duplicates."""
    merged = list(dict.fromkeys(detected))
    for key in override_keys:
        if key in merged:
            continue
        if any(r.has(key) for r in records):
            merged.append(key)
    return merged


def find_utilization_key(record: DayRecord, metric_key: str) -> str | None:
    """First key sharing the process base name that looks like a utilization metric."""
    base = metric_key.removesuffix(MetricKind.PROCESS.value)
    for key in record.metrics:
        if key.startswith(base) and any(m in key for m in UTILIZATION_MARKERS):
            return key
    return None


# ═══════════════════════════════════════════════════════════════════════════
#  Naming and statistics helpers
# ═══════════════════════════════════════════════════════════════════════════


def feature_id(metric_key: str, scenario: str, suffix: str = "") -> str:
    """Strip the scenario prefix and, when given, a trailing *suffix*."""
    fid = metric_key.removeprefix(f"{scenario}_")
    if suffix:
        fid = fid.removesuffix(suffix)
    return fid


def display_name(fid: str) -> str:
    """``queue_1_level`` → ``Queue 1 Level``."""
    return " ".join(word[:1].upper() + word[1:] for word in fid.split("_"))


def mean(values: Sequence[float]) -> float | None:
    return sum(values) / len(values) if values else None


def growth_streak(series: TimeSeries) -> int:
    """Longest run of strictly increasing adjacent slots; absent slots break the run."""
    best = run = 0
    for prev, cur in zip(series, series.values[1:]):
        if prev is not None and cur is not None and cur > prev:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best


def normalize_utilization(value: float) -> float:
    """Values above 1 are percentages; return a 0–1 rate."""
    return value / 100 if value > 1 else value


# ═══════════════════════════════════════════════════════════════════════════
#  Feature builders
# ═══════════════════════════════════════════════════════════════════════════


def build_queue_feature(
    records: Sequence[DayRecord],
    metric_key: str,
    scenario: str,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> QueueFeature:
    series = TimeSeries.from_records(records, metric_key)
    present = series.present()
    max_level = max(present, default=0.0)
    threshold = max_level * config.heuristics.high_level_fraction
    fid = feature_id(metric_key, scenario)
    return QueueFeature(
        id=fid,
        name=display_name(fid),
        metric_key=metric_key,
        time_series=series,
        max_level=max_level,
        average_level=mean(present) or 0.0,
        growth_streak=growth_streak(series),
        days_above_threshold=sum(1 for v in present if v >= threshold),
        total_days=len(present),
    )


def build_process_feature(
    records: Sequence[DayRecord],
    metric_key: str,
    scenario: str,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> ProcessFeature:
    series = TimeSeries.from_records(records, metric_key)
    present = series.present()

    utilization_key = find_utilization_key(records[0], metric_key)
    utilization_rate: float | None = None
    days_at_capacity = 0
    if utilization_key is not None:
        rates = [
            normalize_utilization(v)
            for v in TimeSeries.from_records(records, utilization_key).present()
        ]
        utilization_rate = mean(rates)
        days_at_capacity = sum(1 for r in rates if r >= config.heuristics.capacity_utilization)

    fid = feature_id(metric_key, scenario, MetricKind.PROCESS.value)
    return ProcessFeature(
        id=fid,
        name=display_name(fid),
        metric_key=metric_key,
        time_series=series,
        max_output=max(present, default=0.0),
        average_output=mean(present) or 0.0,
        utilization_rate=utilization_rate,
        days_at_capacity=days_at_capacity,
        total_days=len(present),
        utilization_key=utilization_key if utilization_rate is not None else None,
    )


def extract_queue_features(
    records: Sequence[DayRecord],
    scenario: str,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> list[QueueFeature]:
    """One QueueFeature per discovered queue key (empty for no records)."""
    if not records:
        return []
    keys = merge_metric_keys(
        discover_keys(records[0], MetricKind.QUEUE),
        config.overrides_for(scenario).queues,
        records,
    )
    return [build_queue_feature(records, key, scenario, config) for key in keys]


def extract_process_features(
    records: Sequence[DayRecord],
    scenario: str,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> list[ProcessFeature]:
    """One ProcessFeature per discovered process key (empty for no records)."""
    if not records:
        return []
    keys = merge_metric_keys(
        discover_keys(records[0], MetricKind.PROCESS),
        config.overrides_for(scenario).processes,
        records,
    )
    features = [build_process_feature(records, key, scenario, config) for key in keys]
    log.debug(
        "Scenario %s: %d of %d processes carry utilization data",
        scenario,
        sum(1 for f in features if f.utilization_rate is not None),
        len(features),
    )
    return features
