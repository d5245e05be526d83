"""Pipeline — orchestrator: load days -> extract -> score -> build tab -> report.

``analyze_scenario`` produces one tab; ``run_pipeline`` analyses every
configured scenario listed in meta.json and writes the dashboard JSON.
Scenarios share nothing, each analysis is a full recompute from the
stored day files.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.analyzer.config import DEFAULT_CONFIG, BottleneckConfig
from src.analyzer.extractor import extract_process_features, extract_queue_features
from src.analyzer.payload import build_tab_payload
from src.analyzer.reporter import (
    summary_lines,
    write_dashboard_json,
    write_plots,
    write_report_txt,
)
from src.analyzer.scorer import detect_bottleneck
from src.contracts.day_record import DayRecord
from src.ingest.pipeline import ingest_workbook
from src.store.day_store import DayStore

log = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ═══════════════════════════════════════════════════════════════════════════
#  Scenario Analyzer
# ═══════════════════════════════════════════════════════════════════════════


def analyze_records(
    records: Sequence[DayRecord],
    scenario: str,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> dict[str, Any] | None:
    """Extract -> score -> build for already loaded day records."""
    if not records:
        return None

    queues = extract_queue_features(records, scenario, config)
    processes = extract_process_features(records, scenario, config)
    log.info("  Found %d queues, %d processes", len(queues), len(processes))

    verdict = detect_bottleneck(queues, processes, config)
    log.info(
        "  Primary bottleneck: %s (%s), confidence %.0f%%",
        verdict.primary_bottleneck, verdict.type.value, verdict.confidence * 100,
    )
    return build_tab_payload(records, verdict, queues, processes)


def analyze_scenario(
    store: DayStore,
    scenario: str,
    total_days: int,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> dict[str, Any] | None:
    """Analyse days ``0..total_days-1`` of *scenario*.

    Missing day files are skipped.  Returns None when no day was loaded;
    any other read failure propagates.
    """
    log.info("Analyzing scenario: %s", scenario)
    records = store.load_scenario_data(scenario, 0, total_days - 1)
    log.info("  Loaded %d of %d days", len(records), total_days)
    if not records:
        log.warning("  No data found for scenario: %s", scenario)
        return None
    return analyze_records(records, scenario, config)


# ═══════════════════════════════════════════════════════════════════════════
#  Dashboard run
# ═══════════════════════════════════════════════════════════════════════════


def build_dashboard(
    store: DayStore,
    config: BottleneckConfig = DEFAULT_CONFIG,
) -> dict[str, Any]:
    """Analyse every configured scenario present in meta.json."""
    meta = store.read_meta()
    sheets = meta.get("sheets") or {}
    log.info("Simulation %s (source: %s)", meta.get("simulation_id"), meta.get("source"))

    tabs: dict[str, Any] = {}
    for scenario in config.scenarios:
        sheet_meta = sheets.get(scenario)
        if sheet_meta is None:
            log.warning("Scenario '%s' not found in metadata, skipping", scenario)
            continue
        tab = analyze_scenario(store, scenario, int(sheet_meta.get("days") or 0), config)
        if tab is not None:
            tabs[scenario] = tab

    return {
        "meta": {"simulation_id": meta.get("simulation_id"), "generated_at": _now_iso()},
        "tabs": tabs,
    }


def run_pipeline(
    out_dir: str | Path = "output",
    config: BottleneckConfig = DEFAULT_CONFIG,
    report: bool = True,
) -> dict[str, Any]:
    """Analyse the store at *out_dir* and write the dashboard outputs.

    Returns the dashboard dict that was written to
    ``<out_dir>/frontend/bottleneck_dashboard.json``.
    """
    store = DayStore(out_dir)
    dashboard = build_dashboard(store, config)

    write_dashboard_json(dashboard, store.dashboard_path)
    if report:
        frontend = store.dashboard_path.parent
        write_report_txt(dashboard, frontend / "report.txt")
        write_plots(dashboard, frontend / "plots")

    log.info("Scenarios analyzed: %d", len(dashboard["tabs"]))
    for line in summary_lines(dashboard):
        log.info(line)
    return dashboard


def ingest_and_analyze(
    input_path: str | Path,
    out_dir: str | Path = "output",
    config: BottleneckConfig = DEFAULT_CONFIG,
    simulation_id: str | None = None,
    report: bool = True,
) -> dict[str, Any]:
    """Upload flow: clear the store, ingest the workbook, then analyse it."""
    ingest_workbook(input_path, DayStore(out_dir), simulation_id=simulation_id, clean=True)
    return run_pipeline(out_dir, config, report=report)
