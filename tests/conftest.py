"""Shared fixtures for the Bottleneck Analyzer tests."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import openpyxl
import pytest

from src.contracts.day_record import DayRecord, TimeSeries
from src.contracts.features import ProcessFeature, QueueFeature
from src.store.day_store import DayStore

# absent-key marker for make_days; Ellipsis is a singleton, so identity checks
# hold even though conftest is imported both as a plugin and as tests.conftest
MISSING = ...


# ── Helper: day records ─────────────────────────────────────────────────


def make_day(day: int = 0, **metrics: Any) -> DayRecord:
    return DayRecord(day=day, metrics=metrics)


def make_days(columns: dict[str, Sequence[Any]], start: int = 0) -> list[DayRecord]:
    """Column-wise metrics → one DayRecord per row; ``MISSING`` drops the key."""
    n = max((len(v) for v in columns.values()), default=0)
    records = []
    for i in range(n):
        metrics = {
            key: values[i]
            for key, values in columns.items()
            if i < len(values) and values[i] is not MISSING
        }
        records.append(DayRecord(day=start + i, metrics=metrics))
    return records


# ── Helper: features with explicit statistics ──────────────────────────


def make_queue(
    *,
    id: str = "queue_1_level",
    values: Sequence[float | None] = (),
    max_level: float = 10.0,
    average_level: float = 1.0,
    growth_streak: int = 0,
    days_above_threshold: int = 0,
    total_days: int | None = None,
) -> QueueFeature:
    series = TimeSeries(tuple(values))
    return QueueFeature(
        id=id,
        name=id.replace("_", " ").title(),
        metric_key=f"standard_{id}",
        time_series=series,
        max_level=max_level,
        average_level=average_level,
        growth_streak=growth_streak,
        days_above_threshold=days_above_threshold,
        total_days=len(series.present()) if total_days is None else total_days,
    )


def make_process(
    *,
    id: str = "station_1",
    values: Sequence[float | None] = (),
    utilization_rate: float | None = None,
    days_at_capacity: int = 0,
    total_days: int | None = None,
    utilization_key: str | None = None,
) -> ProcessFeature:
    series = TimeSeries(tuple(values))
    present = series.present()
    return ProcessFeature(
        id=id,
        name=id.replace("_", " ").title(),
        metric_key=f"standard_{id}_output",
        time_series=series,
        max_output=max(present, default=0.0),
        average_output=sum(present) / len(present) if present else 0.0,
        utilization_rate=utilization_rate,
        days_at_capacity=days_at_capacity,
        total_days=len(present) if total_days is None else total_days,
        utilization_key=utilization_key,
    )


# ── Helper: workbooks ──────────────────────────────────────────────────────


def write_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """Write an .xlsx with one sheet per entry (first row = headers)."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


# ── Helper: populated record store ─────────────────────────────────────


def populate_store(
    store: DayStore,
    scenarios: dict[str, dict[str, Sequence[Any]]],
    *,
    skip_days: dict[str, Sequence[int]] | None = None,
    simulation_id: str = "medica_day_test",
) -> None:
    """Write meta.json plus day files for each scenario's column data."""
    skip_days = skip_days or {}
    sheets: dict[str, Any] = {}
    for scenario, columns in scenarios.items():
        records = make_days(columns)
        sheets[scenario] = {"days": len(records), "metrics": ["day", *columns]}
        for rec in records:
            if rec.day in skip_days.get(scenario, ()):
                continue
            store.write_day_chunk(scenario, {"day": rec.day, **rec.metrics}, simulation_id)
    store.write_meta(
        {
            "simulation_id": simulation_id,
            "source": "medica_scientific",
            "file": "test.xlsx",
            "parsed_at": "2026-10-01T00:00:00.000Z",
            "sheets": sheets,
        }
    )


# ── Scenario fixtures ──────────────────────────────────────────────────


@pytest.fixture
def standard_columns() -> dict[str, list[Any]]:
    """Ten days: queue_1 is the 0.8-confidence bottleneck, window days 5–9."""
    return {
        "standard_queue_1_level": [2, 2, 2, 2, 2, 9, 10, 10, 10, 9],
        "standard_queue_2_level": [3] * 10,
        "standard_station_1_output": [10, 12, 11, 10, 12, 11, 10, 12, 11, 10],
        "standard_station_1_utilization": [80] * 10,
        "standard_accepted_orders": [5] * 10,
    }


@pytest.fixture
def custom_columns() -> dict[str, list[Any]]:
    """Six days: override keys decide the bottleneck (a saturated station)."""
    return {
        "custom_queue_1_level": [4] * 6,
        "custom_queue_2_level_first_pass": [MISSING, 1, 2, 3, 4, 5],
        "custom_station_2_output_first_pass": [10] * 6,
        "custom_station_2_output_first_pass_utilization": [0.99] * 6,
    }


@pytest.fixture
def store(tmp_path: Path) -> DayStore:
    return DayStore(tmp_path / "output")
