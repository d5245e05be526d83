"""Tests for src.ingest — workbook parsing and the ingest pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.ingest.parser import (
    SOURCE,
    WorkbookError,
    parse_rows,
    parse_simulation_data,
    validate_upload,
)
from src.ingest.pipeline import ingest_workbook
from tests.conftest import write_workbook


@pytest.fixture
def workbook(tmp_path) -> Path:
    return write_workbook(
        tmp_path / "simulation.xlsx",
        {
            "Standard": [
                ["Day", "Standard Queue 1-Level", "Standard Station 1 Output", "Notes"],
                [0, 3, 10, None],
                [1, 5, "1,200", None],
                [2, 8, 11, None],
            ],
            "Standard-Graphs": [["chart", "data"], [1, 2]],
            "Custom": [
                ["Day", "Custom Queue 1-Level"],
                [0, 1],
                [1, 2],
            ],
        },
    )


# ═══════════════════════════════════════════════════════════════════════════
#  Upload validation
# ═══════════════════════════════════════════════════════════════════════════


class TestValidateUpload:
    def test_xlsx_accepted(self):
        validate_upload("run.xlsx")
        validate_upload("RUN.XLSX")

    @pytest.mark.parametrize("name", ["run.xls", "run.csv", "run"])
    def test_other_extensions_rejected(self, name):
        with pytest.raises(WorkbookError, match="Only .xlsx"):
            validate_upload(name)

    def test_error_is_value_error(self):
        assert issubclass(WorkbookError, ValueError)


# ═══════════════════════════════════════════════════════════════════════════
#  parse_rows
# ═══════════════════════════════════════════════════════════════════════════


class TestParseRows:
    def test_headers_normalized(self):
        rows = parse_rows([("Day", "Queue 1-Level"), (0, 4)])
        assert rows == [{"day": 0, "queue_1_level": 4}]

    def test_empty_sheet(self):
        assert parse_rows([]) == []

    def test_header_only(self):
        assert parse_rows([("Day", "Queue 1-Level")]) == []

    def test_blank_rows_dropped(self):
        rows = parse_rows([("Day", "X"), (0, 1), (None, " "), (1, 2)])
        assert [r["day"] for r in rows] == [0, 1]

    def test_empty_columns_dropped(self):
        rows = parse_rows([("Day", "Notes", "X"), (0, None, 1), (1, "", 2)])
        assert all("notes" not in r for r in rows)

    def test_columns_without_header_dropped(self):
        rows = parse_rows([("Day", None), (0, 9)])
        assert rows == [{"day": 0}]

    def test_short_rows_padded(self):
        rows = parse_rows([("Day", "X", "Y"), (0, 1), (1, 2, 3)])
        assert rows[0] == {"day": 0, "x": 1, "y": None}
        assert rows[1]["y"] == 3

    def test_values_converted(self):
        rows = parse_rows([("Day", "X", "Label"), (0, "2,500", " ok ")])
        assert rows[0] == {"day": 0, "x": 2500.0, "label": "ok"}


# ═══════════════════════════════════════════════════════════════════════════
#  parse_simulation_data
# ═══════════════════════════════════════════════════════════════════════════


class TestParseSimulationData:
    def test_sheets_normalized_and_graphs_skipped(self, workbook):
        parsed = parse_simulation_data(workbook)
        assert set(parsed.sheets) == {"standard", "custom"}

    def test_rows(self, workbook):
        rows = parse_simulation_data(workbook).sheets["standard"]
        assert len(rows) == 3
        assert rows[1] == {
            "day": 1,
            "standard_queue_1_level": 5,
            "standard_station_1_output": 1200.0,
        }

    def test_meta(self, workbook):
        parsed = parse_simulation_data(workbook)
        assert parsed.meta["source"] == SOURCE
        assert parsed.meta["file"] == "simulation.xlsx"
        assert parsed.meta["parsed_at"].endswith("Z")

    def test_max_day(self, workbook):
        assert parse_simulation_data(workbook).max_day() == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorkbookError):
            parse_simulation_data(tmp_path / "nope.xlsx")

    def test_corrupt_file(self, tmp_path):
        bad = tmp_path / "bad.xlsx"
        bad.write_bytes(b"not a zip archive")
        with pytest.raises(WorkbookError):
            parse_simulation_data(bad)


# ═══════════════════════════════════════════════════════════════════════════
#  ingest_workbook
# ═══════════════════════════════════════════════════════════════════════════


class TestIngestWorkbook:
    def test_writes_meta_and_day_files(self, workbook, store):
        stats = ingest_workbook(workbook, store)
        assert stats.simulation_id == "medica_day_2"
        # meta + 3 standard + 2 custom
        assert stats.total_files == 6
        meta = store.read_meta()
        assert meta["sheets"]["standard"]["days"] == 3
        assert meta["sheets"]["custom"]["metrics"] == ["day", "custom_queue_1_level"]

    def test_day_chunk_contents(self, workbook, store):
        ingest_workbook(workbook, store, simulation_id="run_a")
        chunk = json.loads(store.day_path("standard", 2).read_text())
        assert chunk == {
            "simulation_id": "run_a",
            "sheet": "standard",
            "day": 2,
            "metrics": {"standard_queue_1_level": 8, "standard_station_1_output": 11},
        }

    def test_clean_removes_previous_upload(self, workbook, store):
        stale = store.day_path("standard", 40)
        stale.parent.mkdir(parents=True)
        stale.write_text("{}")
        ingest_workbook(workbook, store)
        assert not stale.exists()

    def test_no_clean_keeps_existing_files(self, workbook, store):
        stale = store.day_path("standard", 40)
        stale.parent.mkdir(parents=True)
        stale.write_text("{}")
        ingest_workbook(workbook, store, clean=False)
        assert stale.exists()

    def test_rejects_non_xlsx(self, tmp_path, store):
        csv = tmp_path / "data.csv"
        csv.write_text("day,x\n0,1\n")
        with pytest.raises(WorkbookError):
            ingest_workbook(csv, store)
        assert not store.meta_path.exists()
