"""Ініціалізація стану сесії."""

from __future__ import annotations

import streamlit as st

_DEFAULTS: dict[str, object] = {
    "show_utilization": True,
    "show_tables": True,
    "show_finance": True,
    "auto_refresh": False,
    "refresh_interval": 10,
    "upload_message": "",
}


def init_state() -> None:
    """Заповнює st.session_state значеннями за замовчуванням."""
    for key, value in _DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value
