"""Ingest pipeline: workbook → record store."""

from __future__ import annotations

import logging
from pathlib import Path

from src.ingest.parser import parse_simulation_data, validate_upload
from src.store.day_store import DayStore, WriteStats

log = logging.getLogger(__name__)


def ingest_workbook(
    input_path: str | Path,
    store: DayStore,
    simulation_id: str | None = None,
    clean: bool = True,
) -> WriteStats:
    """Parse *input_path* and write its day chunks into *store*.

    With ``clean`` the store is emptied first, so a later analysis never
    mixes days of two uploads.
    """
    validate_upload(str(input_path))
    parsed = parse_simulation_data(input_path)
    if clean:
        store.clear()
    stats = store.write_chunked_output(parsed, simulation_id=simulation_id)
    log.info(
        "Ingest complete: %s, %d sheets, %d files in %s/",
        stats.simulation_id, stats.sheets, stats.total_files, store.root,
    )
    return stats
