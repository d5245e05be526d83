"""Атомарний запис файлів: day-чанки, звіти, dashboard JSON."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write(path: str | Path, content: str) -> None:
    """Атомарно записує content у файл path (через temp-файл у тій же теці)."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=str(target.parent),
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, target)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def write_json(path: str | Path, obj: Any) -> int:
    """Записує obj як JSON з відступами; повертає розмір у байтах."""
    content = json.dumps(obj, indent=2, ensure_ascii=False)
    atomic_write(path, content)
    return len(content.encode("utf-8"))
