"""Page layout — sidebar controls and header.

``render_sidebar`` draws the upload form and display toggles and returns
the current selections.  ``render_header`` draws the title bar with the
simulation id of the loaded dashboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from src.dashboard.data_access import DASHBOARD_PATH, file_mtime_str, run_upload

log = logging.getLogger(__name__)


@dataclass
class SidebarState:
    """Values collected from sidebar controls."""
    show_utilization: bool
    show_tables: bool
    show_finance: bool
    auto_refresh: bool


# ── header ──────────────────────────────────────────────────────────────────


def render_header(dashboard: dict[str, Any] | None) -> None:
    meta = (dashboard or {}).get("meta", {})
    sim = meta.get("simulation_id") or "no simulation loaded"
    st.markdown(
        '<h1 class="page-title">Production Bottleneck Dashboard</h1>'
        f'<p class="page-subtitle">Simulation: <code>{sim}</code> · '
        f"generated {meta.get('generated_at', 'N/A')}</p>",
        unsafe_allow_html=True,
    )


# ── sidebar ─────────────────────────────────────────────────────────────────


def _handle_upload() -> None:
    uploaded = st.session_state.get("upload_file")
    if uploaded is None:
        st.session_state["upload_message"] = "Choose an .xlsx file first."
        return
    try:
        dashboard = run_upload(uploaded.name, uploaded.getvalue())
    except Exception as exc:
        log.exception("Upload of %s failed", uploaded.name)
        st.session_state["upload_message"] = f"Upload failed: {exc}"
        return
    st.session_state["upload_message"] = (
        f"Analyzed {len(dashboard['tabs'])} scenario(s) from {uploaded.name}."
    )


def render_sidebar() -> SidebarState:
    """Draw sidebar controls and return current selections."""

    with st.sidebar:
        st.markdown('<p class="sidebar-brand">Bottleneck Analyzer</p>', unsafe_allow_html=True)
        st.caption("Discrete-event simulation diagnostics")
        st.divider()

        # -- upload --
        st.markdown("##### Upload simulation")
        st.file_uploader("Workbook (.xlsx)", type=["xlsx"], key="upload_file")
        st.button("Upload & analyze", on_click=_handle_upload, width="stretch")
        if st.session_state.get("upload_message"):
            st.caption(st.session_state["upload_message"])

        st.divider()

        # -- display --
        st.markdown("##### Display")
        show_utilization = st.toggle("Utilization chart", key="show_utilization")
        show_tables = st.toggle("Series tables", key="show_tables")
        show_finance = st.toggle("Finance & inventory", key="show_finance")

        # -- auto refresh (picks up CLI re-runs) --
        auto_refresh = st.toggle("Auto-refresh", key="auto_refresh")
        if auto_refresh:
            interval = st.select_slider(
                "Interval (sec)", options=[5, 10, 30, 60], key="refresh_interval"
            )
            st_autorefresh(interval=interval * 1000, key="dashboard_refresh")

        st.divider()
        st.markdown(
            f'<p class="refresh-timestamp">Dashboard file: {file_mtime_str(DASHBOARD_PATH)}</p>',
            unsafe_allow_html=True,
        )

    return SidebarState(
        show_utilization=show_utilization,
        show_tables=show_tables,
        show_finance=show_finance,
        auto_refresh=auto_refresh,
    )
