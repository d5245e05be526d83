"""BottleneckVerdict — the scorer's single primary-bottleneck diagnosis."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from src.contracts.enums import BottleneckType


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Inclusive day-index range of the critical period."""

    start: int
    end: int

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True, slots=True)
class BottleneckVerdict:
    primary_bottleneck: str  # feature id, or "none"
    type: BottleneckType
    confidence: float  # 0.0 to 1.0, two decimals
    time_window: TimeWindow | None = None

    @classmethod
    def none(cls) -> BottleneckVerdict:
        return cls(primary_bottleneck="none", type=BottleneckType.NONE, confidence=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary_bottleneck": self.primary_bottleneck,
            "type": self.type.value,
            "confidence": self.confidence,
            "time_window": self.time_window.to_dict() if self.time_window else None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
