"""Day-indexed record store: chunked JSON files per sheet and day.

Layout
──────
    <root>/meta.json
    <root>/<sheet>/day_NNN.json     {simulation_id, sheet, day, metrics}
    <root>/history/events.json      {simulation_id, sheet, events}
    <root>/frontend/...             analyzer outputs

Day chunks of one sheet are independent, so they are written through a
thread pool; sheets are processed one after another.  Reads are strictly
read-only and never touch the files being read.
"""

from __future__ import annotations

import json
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.contracts.day_record import DayRecord
from src.contracts.workbook import HISTORY_SHEET, ParsedWorkbook
from src.shared.fileio import write_json

log = logging.getLogger(__name__)

META_FILE = "meta.json"
FRONTEND_DIR = "frontend"
DASHBOARD_FILE = "bottleneck_dashboard.json"
SIMULATION_ID_PREFIX = "medica_day_"


class MissingDayFile(FileNotFoundError):
    """An expected day file is absent from the store."""

    def __init__(self, scenario: str, day: int, path: Path) -> None:
        super().__init__(f"No day {day} for scenario '{scenario}': {path}")
        self.scenario = scenario
        self.day = day
        self.path = path


@dataclass(slots=True)
class WriteStats:
    total_files: int
    simulation_id: str
    sheets: int


def day_file_name(day: int) -> str:
    """``12`` → ``day_012.json``."""
    return f"day_{day:03d}.json"


def _row_day(row: dict[str, Any]) -> int | None:
    day = row.get("day")
    if isinstance(day, bool) or not isinstance(day, (int, float)):
        return None
    return int(day)


class DayStore:
    """Filesystem-backed store rooted at *root* (default ``output/``)."""

    def __init__(self, root: str | Path = "output", max_workers: int = 8) -> None:
        self.root = Path(root)
        self.max_workers = max_workers

    # ── paths ────────────────────────────────────────────────────────────

    @property
    def meta_path(self) -> Path:
        return self.root / META_FILE

    @property
    def dashboard_path(self) -> Path:
        return self.root / FRONTEND_DIR / DASHBOARD_FILE

    def day_path(self, sheet: str, day: int) -> Path:
        return self.root / sheet / day_file_name(day)

    # ── write side ───────────────────────────────────────────────────────

    def clear(self) -> None:
        """Remove every stored file and recreate an empty root."""
        shutil.rmtree(self.root, ignore_errors=True)
        self.root.mkdir(parents=True, exist_ok=True)
        log.info("Cleared store %s", self.root)

    def write_meta(self, metadata: dict[str, Any]) -> None:
        size = write_json(self.meta_path, metadata)
        log.info("Wrote %s (%.2f KB)", META_FILE, size / 1024)

    def write_day_chunk(
        self,
        sheet: str,
        row: dict[str, Any],
        simulation_id: str,
    ) -> Path:
        """Write one day row; every key except ``day`` becomes a metric."""
        day = _row_day(row)
        if day is None:
            raise ValueError(f"Row in sheet '{sheet}' has no numeric day: {row!r}")
        metrics = {k: v for k, v in row.items() if k != "day"}
        path = self.day_path(sheet, day)
        write_json(
            path,
            {"simulation_id": simulation_id, "sheet": sheet, "day": day, "metrics": metrics},
        )
        return path

    def write_history(self, events: list[dict[str, Any]], simulation_id: str) -> None:
        write_json(
            self.root / HISTORY_SHEET / "events.json",
            {"simulation_id": simulation_id, "sheet": HISTORY_SHEET, "events": events},
        )
        log.info("  history: 1 file (%d events)", len(events))

    def write_chunked_output(
        self,
        parsed: ParsedWorkbook,
        simulation_id: str | None = None,
    ) -> WriteStats:
        """Write meta.json plus one file per day per sheet."""
        self.root.mkdir(parents=True, exist_ok=True)
        sim_id = simulation_id or f"{SIMULATION_ID_PREFIX}{parsed.max_day()}"
        log.info("Simulation ID: %s", sim_id)

        self.write_meta(build_metadata(parsed, sim_id))
        total_files = 1

        for sheet, rows in parsed.sheets.items():
            if not rows:
                log.warning("Skipping empty sheet: %s", sheet)
                continue

            if sheet == HISTORY_SHEET:
                self.write_history(rows, sim_id)
                total_files += 1
                continue

            day_rows = [r for r in rows if _row_day(r) is not None]
            if len(day_rows) < len(rows):
                log.warning(
                    "Sheet %s: %d rows without a day number skipped",
                    sheet, len(rows) - len(day_rows),
                )
            (self.root / sheet).mkdir(parents=True, exist_ok=True)
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                written = list(pool.map(lambda r: self.write_day_chunk(sheet, r, sim_id), day_rows))
            total_files += len(written)
            log.info("  %s: %d files", sheet, len(written))

        log.info("Total files written: %d", total_files)
        return WriteStats(total_files=total_files, simulation_id=sim_id, sheets=len(parsed.sheets))

    # ── read side ────────────────────────────────────────────────────────

    def read_meta(self) -> dict[str, Any]:
        """Load meta.json.  Raises FileNotFoundError when the store is empty."""
        with self.meta_path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def load_day(self, scenario: str, day: int) -> DayRecord:
        """Load one day record.

        Raises:
            MissingDayFile: The day file does not exist.
            OSError, json.JSONDecodeError: Any other read failure.
        """
        path = self.day_path(scenario, day)
        try:
            with path.open(encoding="utf-8") as fh:
                obj = json.load(fh)
        except FileNotFoundError:
            raise MissingDayFile(scenario, day, path) from None
        return DayRecord.from_dict(obj)

    def load_scenario_data(self, scenario: str, start_day: int, end_day: int) -> list[DayRecord]:
        """Load days ``start_day..end_day`` (inclusive), skipping missing files."""
        records: list[DayRecord] = []
        for day in range(start_day, end_day + 1):
            try:
                records.append(self.load_day(scenario, day))
            except MissingDayFile as exc:
                log.debug("Skipping %s", exc)
        return records


def build_metadata(parsed: ParsedWorkbook, simulation_id: str) -> dict[str, Any]:
    """meta.json contents: day counts and metric names per sheet."""
    meta: dict[str, Any] = {
        "simulation_id": simulation_id,
        "source": parsed.meta.get("source"),
        "file": parsed.meta.get("file"),
        "parsed_at": parsed.meta.get("parsed_at"),
        "sheets": {},
    }
    for sheet, rows in parsed.sheets.items():
        metrics = list(rows[0].keys()) if rows else []
        if sheet == HISTORY_SHEET:
            meta["sheets"][sheet] = {"events": len(rows), "metrics": metrics}
        else:
            meta["sheets"][sheet] = {"days": len(rows), "metrics": metrics}
    return meta
