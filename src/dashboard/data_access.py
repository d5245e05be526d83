"""Шар завантаження даних: dashboard JSON → dict та DataFrame."""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd

from src.analyzer.pipeline import ingest_and_analyze
from src.dashboard.finance import FinanceKpis, finance_charts, finance_inventory_frame, finance_kpis
from src.ingest.parser import validate_upload
from src.store.day_store import DASHBOARD_FILE, FRONTEND_DIR, DayStore

log = logging.getLogger(__name__)

# ── paths (relative to repo root) ───────────────────────────────────────────

ROOT = Path(__file__).resolve().parent.parent.parent
OUTPUT_DIR = ROOT / "output"
UPLOAD_DIR = ROOT / "uploads"
DASHBOARD_PATH = OUTPUT_DIR / FRONTEND_DIR / DASHBOARD_FILE

# ── retry settings (file may be mid-replace during an upload) ───────────────

_MAX_READ_RETRIES = 3
_READ_RETRY_DELAY_SEC = 0.15


# ── file info helpers ───────────────────────────────────────────────────────


def file_mtime(path: Path) -> float:
    """Повертає mtime як UNIX timestamp, або 0.0 якщо файл відсутній."""
    try:
        return os.path.getmtime(path) if path.exists() else 0.0
    except OSError:
        return 0.0


def file_mtime_str(path: Path) -> str:
    """Повертає людськочитаний mtime файлу, або 'N/A'."""
    ts = file_mtime(path)
    if ts == 0.0:
        return "N/A"
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def file_size(path: Path) -> int:
    """Повертає розмір файлу в байтах, або 0."""
    try:
        return path.stat().st_size if path.exists() else 0
    except OSError:
        return 0


# ── loaders ─────────────────────────────────────────────────────────────────


def _read_json_safe(path: Path) -> dict[str, Any] | None:
    """Зчитує JSON з повторними спробами; None якщо файл відсутній або зламаний."""
    for attempt in range(1, _MAX_READ_RETRIES + 1):
        if not path.exists():
            return None
        try:
            with path.open(encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            log.debug(
                "JSON read attempt %d/%d for %s failed: %s",
                attempt, _MAX_READ_RETRIES, path, exc,
            )
            if attempt < _MAX_READ_RETRIES:
                time.sleep(_READ_RETRY_DELAY_SEC)
    return None


def load_dashboard(path: Path = DASHBOARD_PATH) -> dict[str, Any] | None:
    """Завантажує bottleneck_dashboard.json. Повертає None якщо відсутній."""
    return _read_json_safe(path)


def load_finance_inventory(
    root: Path = OUTPUT_DIR,
) -> tuple[FinanceKpis, dict[str, Any]] | None:
    """KPI та графіки аркушів financial / inventory; None якщо даних немає."""
    try:
        df = finance_inventory_frame(DayStore(root))
    except FileNotFoundError:
        return None
    if df is None:
        return None
    return finance_kpis(df), finance_charts(df)


# ── chart frames ────────────────────────────────────────────────────────────


def chart_frame(chart: dict[str, Any]) -> pd.DataFrame:
    """Wide frame: one row per day label, one column per series id."""
    data = {s["id"]: s["values"] for s in chart.get("series", [])}
    df = pd.DataFrame(data, index=pd.Index(chart.get("labels", []), name="day"))
    return df.astype("float64")


def series_stats(chart: dict[str, Any]) -> pd.DataFrame:
    """Per-series summary (present days, min, mean, max) for the table view."""
    df = chart_frame(chart)
    names = {s["id"]: s["name"] for s in chart.get("series", [])}
    flags = {s["id"]: bool(s.get("highlight")) for s in chart.get("series", [])}
    if df.empty:
        return pd.DataFrame(columns=["name", "days", "min", "mean", "max", "bottleneck"])
    stats = pd.DataFrame(
        {
            "name": [names[c] for c in df.columns],
            "days": df.count().to_numpy(),
            "min": df.min().to_numpy(),
            "mean": df.mean().to_numpy(),
            "max": df.max().to_numpy(),
            "bottleneck": [flags[c] for c in df.columns],
        },
        index=pd.Index(df.columns, name="id"),
    )
    return stats.sort_values("bottleneck", ascending=False, kind="stable")


# ── upload ──────────────────────────────────────────────────────────────────


def run_upload(file_name: str, content: bytes) -> dict[str, Any]:
    """Зберігає завантажений workbook і запускає ingest + аналіз."""
    validate_upload(file_name)
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    target = UPLOAD_DIR / Path(file_name).name
    target.write_bytes(content)
    log.info("Stored upload %s (%d bytes)", target, len(content))
    return ingest_and_analyze(target, out_dir=OUTPUT_DIR)
