"""Streamlit entry point of the bottleneck dashboard.

Run with ``streamlit run src/dashboard/app.py`` from the repo root.
"""

from __future__ import annotations

from pathlib import Path

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="Production Bottleneck Dashboard",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── inject theme CSS ────────────────────────────────────────────────────────

_CSS_PATH = Path(__file__).resolve().parent / "styles" / "theme.css"
if _CSS_PATH.exists():
    st.markdown(f"<style>{_CSS_PATH.read_text()}</style>", unsafe_allow_html=True)

# ── local imports (after page config) ───────────────────────────────────────

from src.dashboard.data_access import (  # noqa: E402
    DASHBOARD_PATH,
    file_size,
    load_dashboard,
    load_finance_inventory,
    series_stats,
)
from src.dashboard.ui.cards import summary_card  # noqa: E402
from src.dashboard.ui.charts import (  # noqa: E402
    CHART_CONFIG,
    CHART_TITLES,
    finance_chart,
    series_chart,
)
from src.dashboard.ui.layout import render_header, render_sidebar  # noqa: E402
from src.dashboard.ui.state import init_state  # noqa: E402
from src.dashboard.ui.tables import render_series_table  # noqa: E402

init_state()

sidebar = render_sidebar()
dashboard = load_dashboard()
render_header(dashboard)

# ── finance & inventory ─────────────────────────────────────────────────────

if sidebar.show_finance:
    finance = load_finance_inventory()
    if finance is not None:
        kpis, finance_charts = finance
        st.markdown("#### Finance & Inventory Control")
        cols = st.columns(5)
        cols[0].metric("Total Stockout Days", f"{kpis.stockout_days} days")
        cols[1].metric("Average Inventory Level", f"{kpis.avg_inventory_level:,} units")
        cols[2].metric("Average Cash On Hand", f"{kpis.avg_cash_on_hand:,}")
        cols[3].metric("Inventory Cost Efficiency", f"{kpis.inventory_cost_pct:.2f}%")
        cols[4].metric("Reorder Events", f"{kpis.reorder_events} times")

        for col, (chart_name, chart) in zip(st.columns(3), finance_charts.items()):
            fig = finance_chart(chart_name, chart)
            if fig is not None:
                col.plotly_chart(
                    fig, width="stretch", config=CHART_CONFIG, key=f"finance_{chart_name}"
                )
        st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)

# ── guard: no data ──────────────────────────────────────────────────────────

if dashboard is None or not dashboard.get("tabs"):
    st.markdown(
        '<div class="no-data-box">'
        "<strong>No analysis yet.</strong> "
        f"<code>{DASHBOARD_PATH.name}</code> was not found or holds no scenarios.<br><br>"
        "Upload a workbook in the sidebar, or run:<br>"
        "<code>python -m src.analyzer --ingest file/simulation.xlsx</code>"
        "</div>",
        unsafe_allow_html=True,
    )
    st.stop()

# ── one tab per scenario ────────────────────────────────────────────────────

scenarios = list(dashboard["tabs"].keys())
for scenario, tab_ui in zip(scenarios, st.tabs([s.capitalize() for s in scenarios])):
    tab = dashboard["tabs"][scenario]
    summary = tab["summary"]
    with tab_ui:
        st.markdown(summary_card(scenario, summary), unsafe_allow_html=True)
        st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)

        for chart_name, chart in tab["charts"].items():
            if chart_name == "utilization" and not sidebar.show_utilization:
                continue
            fig = series_chart(chart_name, chart, summary)
            if fig is None:
                st.markdown(
                    '<div class="no-data-box">'
                    f"<strong>{CHART_TITLES.get(chart_name, chart_name)}</strong><br>"
                    "No metrics of this kind were found."
                    "</div>",
                    unsafe_allow_html=True,
                )
                continue
            st.plotly_chart(
                fig,
                width="stretch",
                config=CHART_CONFIG,
                key=f"chart_{scenario}_{chart_name}",
            )
            if sidebar.show_tables:
                render_series_table(series_stats(chart), key=f"tbl_{scenario}_{chart_name}")

st.caption(f"{DASHBOARD_PATH.name}: {file_size(DASHBOARD_PATH)} bytes")
