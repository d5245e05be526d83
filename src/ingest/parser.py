"""Workbook parser: simulation .xlsx export → ParsedWorkbook.

Every non-graph sheet is read as a table whose first row holds the
headers.  Headers are normalized into metric keys, blank columns are
dropped and cells are converted with ``normalize.convert_value``.  No
column names are hard-coded, so any metric set works.
"""

from __future__ import annotations

import logging
import zipfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from src.contracts.workbook import ParsedWorkbook
from src.ingest.normalize import (
    convert_value,
    is_empty_column,
    is_empty_value,
    normalize_column_name,
    normalize_sheet_name,
)

log = logging.getLogger(__name__)

SOURCE = "medica_scientific"
GRAPH_SHEET_SUFFIX = "-Graphs"
ACCEPTED_SUFFIXES = (".xlsx",)


class WorkbookError(ValueError):
    """The uploaded file cannot be read as a simulation workbook."""


def validate_upload(file_name: str) -> None:
    """Reject anything that is not an .xlsx file."""
    if Path(file_name).suffix.lower() not in ACCEPTED_SUFFIXES:
        raise WorkbookError(f"Only .xlsx files are supported, got: {file_name}")


def load_workbook(path: str | Path) -> Workbook:
    try:
        wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
        raise WorkbookError(f"Failed to load workbook {path}: {exc}") from exc
    log.info("Loaded workbook %s (%d sheets: %s)", path, len(wb.sheetnames), ", ".join(wb.sheetnames))
    return wb


def filter_sheets(wb: Workbook) -> list[str]:
    """Names of the sheets to parse; ``*-Graphs`` sheets are skipped."""
    names: list[str] = []
    for name in wb.sheetnames:
        if name.endswith(GRAPH_SHEET_SUFFIX):
            log.info("Skipping graph sheet: %s", name)
            continue
        names.append(name)
    return names


def parse_rows(raw_rows: list[tuple[Any, ...]], sheet_name: str = "") -> list[dict[str, Any]]:
    """Turn a header row plus data rows into ``{metric_key: value}`` dicts."""
    if not raw_rows:
        log.warning("Sheet '%s' is empty", sheet_name)
        return []

    raw_headers = list(raw_rows[0])
    width = max(len(r) for r in raw_rows)
    raw_headers += [None] * (width - len(raw_headers))
    data_rows = [
        list(r) + [None] * (width - len(r))
        for r in raw_rows[1:]
        if not all(is_empty_value(v) for v in r)
    ]

    headers = [normalize_column_name(h) for h in raw_headers]
    keep: list[int] = []
    empty = 0
    for idx, header in enumerate(headers):
        if is_empty_column(row[idx] for row in data_rows):
            empty += 1
            continue
        if header:
            keep.append(idx)

    log.info(
        "Processing sheet '%s': %d rows, %d columns",
        sheet_name, len(data_rows), len(keep),
    )
    if empty:
        log.info("  Removed %d empty columns", empty)

    return [{headers[i]: convert_value(row[i]) for i in keep} for row in data_rows]


def parse_simulation_data(path: str | Path) -> ParsedWorkbook:
    """Parse every data sheet of the workbook at *path*."""
    wb = load_workbook(path)
    try:
        sheets: dict[str, list[dict[str, Any]]] = {}
        for name in filter_sheets(wb):
            rows = list(wb[name].iter_rows(values_only=True))
            sheets[normalize_sheet_name(name)] = parse_rows(rows, name)
    finally:
        wb.close()

    parsed = ParsedWorkbook(
        meta={
            "source": SOURCE,
            "file": Path(path).name,
            "parsed_at": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        },
        sheets=sheets,
    )
    for name, rows in sheets.items():
        log.info("  %s: %d rows", name, len(rows))
    return parsed
