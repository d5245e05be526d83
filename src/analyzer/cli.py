"""CLI entry-point for the bottleneck analyzer.

Usage examples
--------------
# Analyse an already ingested store:
python -m src.analyzer --out-dir output

# Upload flow: ingest a workbook into a fresh store, then analyse:
python -m src.analyzer --ingest file/simulation.xlsx --out-dir output

# Alternate heuristic configuration:
python -m src.analyzer --config config/bottleneck.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys

from src.analyzer.config import load_config
from src.analyzer.pipeline import ingest_and_analyze, run_pipeline
from src.shared.logger import setup_logging

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="analyzer",
        description="Bottleneck Analyzer — day metrics -> primary bottleneck per scenario",
    )
    p.add_argument(
        "--out-dir",
        default="output",
        help="Record store directory with meta.json and day files. Default: output/",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Heuristic config YAML (thresholds, weights, overrides). "
             "Default: built-in reference values.",
    )
    p.add_argument(
        "--ingest",
        default=None,
        metavar="XLSX",
        help="Clear the store and ingest this workbook before analysing.",
    )
    p.add_argument(
        "--simulation-id",
        default=None,
        help="Simulation id for --ingest (default: medica_day_<max day>).",
    )
    p.add_argument(
        "--no-report",
        action="store_true",
        default=False,
        help="Write only the dashboard JSON (skip report.txt and plots).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
        if args.ingest:
            ingest_and_analyze(
                args.ingest,
                out_dir=args.out_dir,
                config=config,
                simulation_id=args.simulation_id,
                report=not args.no_report,
            )
        else:
            run_pipeline(args.out_dir, config, report=not args.no_report)
    except Exception as exc:
        log.error("Analysis failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
