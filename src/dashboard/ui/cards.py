"""HTML-компоненти карток підсумку."""

from __future__ import annotations

from html import escape
from typing import Any

from src.analyzer.extractor import display_name

# ── bottleneck type colours & labels ────────────────────────────────────────

TYPE_COLORS: dict[str, str] = {
    "queue": "#f59e0b",
    "process": "#ef4444",
    "none": "#22c55e",
}

TYPE_DISPLAY: dict[str, str] = {
    "queue": "Queue build-up",
    "process": "Process at capacity",
    "none": "No bottleneck",
}


def summary_card(scenario: str, summary: dict[str, Any]) -> str:
    """Картка з основним вузьким місцем, впевненістю та критичним вікном."""
    kind = summary.get("type", "none")
    color = TYPE_COLORS.get(kind, "#888")
    window = summary.get("time_window")
    period = f"Days {window['start']}–{window['end']}" if window else "n/a"
    bottleneck = summary.get("primary_bottleneck", "none")
    return (
        f'<div class="summary-card" style="border-left: 4px solid {color};">'
        f'  <div class="summary-card-header">{escape(scenario.capitalize())} scenario</div>'
        f'  <div class="summary-card-body">'
        f'    <div class="summary-metric-main">{escape(display_name(bottleneck))}</div>'
        f'    <div class="summary-metric-label">{TYPE_DISPLAY.get(kind, kind)}</div>'
        f'    <div class="summary-metric-row">'
        f'      <span class="summary-metric-item">Confidence: {summary.get("confidence", 0) * 100:.0f}%</span>'
        f'      <span class="summary-metric-item">Critical period: {period}</span>'
        f"    </div>"
        f"  </div>"
        f"</div>"
    )
