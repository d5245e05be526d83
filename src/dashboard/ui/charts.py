"""Plotly chart builders."""

from __future__ import annotations

from typing import Any

import plotly.graph_objects as go

from src.dashboard.data_access import chart_frame
from src.dashboard.finance import FINANCE_CHART_TITLES
from src.dashboard.ui.cards import TYPE_COLORS

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

CHART_TITLES: dict[str, str] = {
    "queue_levels": "Queue Levels",
    "process_output": "Process Output",
    "utilization": "Utilization (%)",
    **FINANCE_CHART_TITLES,
}

# ── shared layout ───────────────────────────────────────────────────────────

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13, color="#c9d1d9")

_LAYOUT: dict = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14, color="#e6edf3"), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    hovermode="x unified",
    height=360,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"


def _base(**overrides: object) -> dict:
    merged = {**_LAYOUT}
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


# ── series line chart ───────────────────────────────────────────────────────


def series_chart(
    chart_name: str,
    chart: dict[str, Any],
    summary: dict[str, Any],
) -> go.Figure | None:
    """Line chart of every series; the bottleneck series is drawn bold.

    Returns *None* for a chart without series so the caller can show a
    placeholder.  The critical window is shaded when the highlighted
    series lives in this chart.
    """
    if not chart.get("series"):
        return None

    df = chart_frame(chart)
    accent = TYPE_COLORS.get(summary.get("type", "none"), "#888")
    fig = go.Figure()
    highlighted = False
    for s in chart["series"]:
        hl = bool(s.get("highlight"))
        highlighted |= hl
        fig.add_trace(
            go.Scatter(
                x=df.index,
                y=df[s["id"]],
                name=s["name"],
                mode="lines",
                connectgaps=False,
                line=dict(width=3.5 if hl else 1.5, color=accent if hl else None),
                opacity=1.0 if hl else 0.55,
                hovertemplate=f"{s['name']}: %{{y:.2f}}<extra></extra>",
            )
        )

    window = summary.get("time_window")
    labels = chart.get("labels", [])
    if highlighted and window and labels:
        fig.add_vrect(
            x0=labels[window["start"]],
            x1=labels[window["end"]],
            fillcolor=accent,
            opacity=0.08,
            line_width=0,
        )

    fig.update_layout(
        **_base(
            title=dict(text=CHART_TITLES.get(chart_name, chart_name)),
            xaxis=dict(title="Day", gridcolor=_GRID_COLOR),
            yaxis=dict(title="", gridcolor=_GRID_COLOR, zeroline=False),
        )
    )
    return fig


# ── finance & inventory ─────────────────────────────────────────────────────


def finance_chart(chart_name: str, chart: dict[str, Any]) -> go.Figure | None:
    """Finance line chart; reorder days are marked on the first series."""
    fig = series_chart(chart_name, chart, {"type": "none"})
    reorder = chart.get("reorder_days") or []
    if fig is None or not reorder:
        return fig

    first = chart["series"][0]
    by_day = dict(zip(chart["labels"], first["values"]))
    fig.add_trace(
        go.Scatter(
            x=reorder,
            y=[by_day.get(d) for d in reorder],
            name="Reorder",
            mode="markers",
            marker=dict(symbol="triangle-up", size=10, color="#f59e0b"),
            hovertemplate="Reorder on day %{x}<extra></extra>",
        )
    )
    return fig
