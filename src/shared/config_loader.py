"""Завантаження YAML конфігурацій."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)


def load_yaml(path: str | Path, *, missing_ok: bool = False) -> dict[str, Any]:
    """Зчитує YAML файл та повертає його вміст як dict.

    Args:
        path: Шлях до файлу.
        missing_ok: Повернути порожній dict замість винятку, якщо файлу
            немає.

    Returns:
        Вміст файлу як словник (порожній для порожнього документа).

    Raises:
        FileNotFoundError: Якщо файл не знайдено і ``missing_ok`` = False.
        ValueError: Якщо документ не є mapping.
    """
    p = Path(path)
    if not p.exists():
        if missing_ok:
            log.debug("Config %s not found, using defaults", p)
            return {}
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config {p} must be a mapping, got {type(data).__name__}")
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}
