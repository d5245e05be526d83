"""ParsedWorkbook — normalized spreadsheet contents handed to the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

HISTORY_SHEET = "history"


@dataclass(slots=True)
class ParsedWorkbook:
    """Parser output: workbook meta plus rows per normalized sheet name.

    ``meta`` carries ``source``, ``file`` and ``parsed_at``.  Every row is
    a ``{normalized_header: value}`` dict; rows of day-based sheets hold a
    ``day`` entry.
    """

    meta: dict[str, Any]
    sheets: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    def day_sheets(self) -> dict[str, list[dict[str, Any]]]:
        return {k: v for k, v in self.sheets.items() if k != HISTORY_SHEET}

    def max_day(self) -> int:
        """Largest ``day`` across all day-based sheets (0 when none)."""
        days = [
            int(row["day"])
            for rows in self.day_sheets().values()
            for row in rows
            if isinstance(row.get("day"), (int, float)) and not isinstance(row.get("day"), bool)
        ]
        return max(days, default=0)
