"""CLI entry-point for workbook ingestion.

Usage
-----
python -m src.ingest --input file/simulation.xlsx --out-dir output
"""

from __future__ import annotations

import argparse
import logging
import sys

from src.ingest.pipeline import ingest_workbook
from src.shared.logger import setup_logging
from src.store.day_store import DayStore

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ingest",
        description="Simulation ingest -- .xlsx export -> chunked day files",
    )
    p.add_argument(
        "--input",
        required=True,
        help="Simulation workbook (.xlsx).",
    )
    p.add_argument(
        "--out-dir",
        default="output",
        help="Record store directory (default: output/)",
    )
    p.add_argument(
        "--simulation-id",
        default=None,
        help="Override the simulation id (default: medica_day_<max day>).",
    )
    p.add_argument(
        "--no-clean",
        action="store_true",
        default=False,
        help="Keep existing files in --out-dir instead of clearing it first.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        ingest_workbook(
            args.input,
            DayStore(args.out_dir),
            simulation_id=args.simulation_id,
            clean=not args.no_clean,
        )
    except Exception as exc:
        log.error("Ingest failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
