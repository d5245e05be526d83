"""Звітування: запис dashboard JSON, TXT, PNG."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from src.shared.fileio import atomic_write, write_json

log = logging.getLogger(__name__)

CHART_TITLES: dict[str, str] = {
    "queue_levels": "Queue Levels",
    "process_output": "Process Output",
    "utilization": "Utilization (%)",
}


# ═══════════════════════════════════════════════════════════════════════════
#  Dashboard JSON
# ═══════════════════════════════════════════════════════════════════════════


def write_dashboard_json(dashboard: dict[str, Any], path: str | Path) -> None:
    size = write_json(path, dashboard)
    log.info("Wrote dashboard → %s (%.2f KB)", path, size / 1024)


# ═══════════════════════════════════════════════════════════════════════════
#  TXT report
# ═══════════════════════════════════════════════════════════════════════════


def summary_lines(dashboard: dict[str, Any]) -> list[str]:
    """Підсумок вузького місця по сценаріях, один блок на вкладку."""
    lines: list[str] = []
    for scenario, tab in dashboard.get("tabs", {}).items():
        s = tab["summary"]
        lines.append(f"{scenario.upper()}:")
        lines.append(f"  Primary Bottleneck: {s['primary_bottleneck']}")
        lines.append(f"  Type:               {s['type']}")
        lines.append(f"  Confidence:         {s['confidence'] * 100:.0f}%")
        window = s.get("time_window")
        if window:
            lines.append(f"  Critical Period:    Days {window['start']}-{window['end']}")
    return lines


def write_report_txt(dashboard: dict[str, Any], path: str | Path) -> None:
    """Генерує текстовий звіт."""
    meta = dashboard.get("meta", {})
    lines = [
        "=" * 60,
        "  Production Line Bottleneck Report",
        "=" * 60,
        f"  Simulation:   {meta.get('simulation_id')}",
        f"  Generated at: {meta.get('generated_at')}",
        f"  Scenarios:    {len(dashboard.get('tabs', {}))}",
        "",
        "--- Bottleneck Summary ---",
        *summary_lines(dashboard),
        "",
        "=" * 60,
    ]
    atomic_write(path, "\n".join(lines) + "\n")
    log.info("Wrote report → %s", path)


# ═══════════════════════════════════════════════════════════════════════════
#  Plots (matplotlib)
# ═══════════════════════════════════════════════════════════════════════════


def write_plots(dashboard: dict[str, Any], out_dir: str | Path) -> list[Path]:
    """One PNG per scenario chart; the bottleneck series is drawn bold and
    its critical window shaded."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    plots_dir = Path(out_dir)
    plots_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    for scenario, tab in dashboard.get("tabs", {}).items():
        window = tab["summary"].get("time_window")
        for chart_name, chart in tab["charts"].items():
            labels = chart["labels"]
            if not chart["series"]:
                continue

            fig, ax = plt.subplots(figsize=(10, 5))
            highlighted = False
            for series in chart["series"]:
                # matplotlib draws None as a gap
                values = [float("nan") if v is None else v for v in series["values"]]
                if series["highlight"]:
                    highlighted = True
                    ax.plot(labels, values, label=series["name"], linewidth=2.5, color="#e74c3c")
                else:
                    ax.plot(labels, values, label=series["name"], linewidth=1.0, alpha=0.6)

            if highlighted and window and labels:
                ax.axvspan(labels[window["start"]], labels[window["end"]], color="#e74c3c", alpha=0.08)

            ax.set_xlabel("Day")
            ax.set_title(f"{scenario.capitalize()} — {CHART_TITLES.get(chart_name, chart_name)}")
            ax.legend(fontsize=8, loc="upper left")
            fig.tight_layout()
            path = plots_dir / f"{scenario}_{chart_name}.png"
            fig.savefig(str(path), dpi=120)
            plt.close(fig)
            written.append(path)
            log.info("Wrote plots/%s", path.name)

    return written
