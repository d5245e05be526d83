"""DayRecord and TimeSeries — one simulated day and one metric over all days."""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

MetricValue = float | int | str | None


def _as_number(value: Any) -> float | int | None:
    """Return *value* if it is a finite number, otherwise None (absent)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


@dataclass(frozen=True, slots=True)
class DayRecord:
    """All metric values of one scenario for one simulated day."""

    day: int
    metrics: Mapping[str, MetricValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only view; records are immutable once loaded
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    def has(self, key: str) -> bool:
        return key in self.metrics

    def number(self, key: str) -> float | int | None:
        """Numeric value for *key*, or None when missing, null or non-numeric."""
        return _as_number(self.metrics.get(key))

    # ── serialisation ─────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day, "metrics": dict(self.metrics)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> DayRecord:
        """Build from a stored day chunk (``{"day": n, "metrics": {...}}``)."""
        return cls(day=int(obj["day"]), metrics=obj.get("metrics") or {})


@dataclass(frozen=True, slots=True)
class TimeSeries:
    """Index-aligned metric values where every slot is present or absent.

    Absent slots (``None``) are excluded from statistics but keep their
    position, so window math still sees them as days.
    """

    values: tuple[float | int | None, ...] = ()

    @classmethod
    def from_records(cls, records: Sequence[DayRecord], key: str) -> TimeSeries:
        return cls(tuple(r.number(key) for r in records))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float | int | None]:
        return iter(self.values)

    def __getitem__(self, index: int) -> float | int | None:
        return self.values[index]

    def present(self) -> list[float | int]:
        """Values that are present, in order."""
        return [v for v in self.values if v is not None]

    def halves(self) -> tuple[TimeSeries, TimeSeries]:
        """Split at ``floor(len / 2)``; the second half gets the odd slot."""
        mid = len(self.values) // 2
        return TimeSeries(self.values[:mid]), TimeSeries(self.values[mid:])

    def to_list(self) -> list[float | int | None]:
        return list(self.values)
