"""Tab Payload Builder — chart-ready JSON for one scenario tab.

    {
      "summary": {primary_bottleneck, type, confidence, time_window},
      "charts": {
        "queue_levels":   {"labels": [day...], "series": [{id, name, values, highlight}...]},
        "process_output": {...},
        "utilization":    {...}     # only when some process has utilization data
      }
    }
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from src.contracts.day_record import DayRecord, TimeSeries
from src.contracts.enums import BottleneckType
from src.contracts.features import ProcessFeature, QueueFeature
from src.contracts.verdict import BottleneckVerdict


def _is_highlighted(fid: str, kind: BottleneckType, verdict: BottleneckVerdict) -> bool:
    return verdict.type == kind and verdict.primary_bottleneck == fid


def utilization_percent(value: float | None) -> float | None:
    """Display form: fractions become 0–100, values above 1 are kept."""
    if value is None:
        return None
    return value if value > 1 else value * 100


def _chart(labels: list[int], series: list[dict[str, Any]]) -> dict[str, Any]:
    return {"labels": list(labels), "series": series}


def build_tab_payload(
    records: Sequence[DayRecord],
    verdict: BottleneckVerdict,
    queues: Sequence[QueueFeature],
    processes: Sequence[ProcessFeature],
) -> dict[str, Any]:
    labels = [r.day for r in records]

    queue_series = [
        {
            "id": q.id,
            "name": q.name,
            "values": q.time_series.to_list(),
            "highlight": _is_highlighted(q.id, BottleneckType.QUEUE, verdict),
        }
        for q in queues
    ]
    process_series = [
        {
            "id": p.id,
            "name": p.name,
            "values": p.time_series.to_list(),
            "highlight": _is_highlighted(p.id, BottleneckType.PROCESS, verdict),
        }
        for p in processes
    ]

    utilization_series: list[dict[str, Any]] = []
    for p in processes:
        if p.utilization_rate is None or p.utilization_key is None:
            continue
        raw = TimeSeries.from_records(records, p.utilization_key)
        utilization_series.append(
            {
                "id": f"{p.id}_utilization",
                "name": f"{p.name} Utilization %",
                "values": [utilization_percent(v) for v in raw],
                "highlight": _is_highlighted(p.id, BottleneckType.PROCESS, verdict),
            }
        )

    charts: dict[str, Any] = {
        "queue_levels": _chart(labels, queue_series),
        "process_output": _chart(labels, process_series),
    }
    if utilization_series:
        charts["utilization"] = _chart(labels, utilization_series)

    return {"summary": verdict.to_dict(), "charts": charts}
