"""Finance & inventory view: ``financial`` / ``inventory`` day files → frame, KPIs, charts.

The two sheets are joined on the day number.  Charts use the same
``{labels, series: [{id, name, values, highlight}]}`` shape as the
bottleneck tabs so the Plotly builders can draw both.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from src.contracts.day_record import DayRecord
from src.store.day_store import DayStore

log = logging.getLogger(__name__)

FINANCE_SHEET = "financial"
INVENTORY_SHEET = "inventory"
FALLBACK_DAYS = 50

# frame column → normalized workbook key
FINANCE_COLUMNS: dict[str, str] = {
    "cash_on_hand": "finance_cash_on_hand",
    "inventory_costs": "finance_inventory_costs_*to_date",
    "ordering_costs": "finance_standard_ordering_costs_*to_date",
    "salaries": "finance_salaries_*to_date",
    "interest_earned": "finance_interest_earned_*to_date",
    "sales_standard": "finance_sales_standard_*to_date",
    "sales_custom": "finance_sales_custom_*to_date",
}

INVENTORY_COLUMNS: dict[str, str] = {
    "inventory_level": "inventory_level",
    "dispatches": "inventory_dispatches",
}

FINANCE_CHART_TITLES: dict[str, str] = {
    "inventory_cash": "Inventory vs Cash On Hand",
    "cost_accumulation": "Cost Accumulation Breakdown",
    "sales": "Sales Performance Overview",
}


@dataclass(frozen=True, slots=True)
class FinanceKpis:
    stockout_days: int
    avg_inventory_level: int
    avg_cash_on_hand: int
    inventory_cost_pct: float  # final inventory cost / total sales * 100
    reorder_events: int


# ═══════════════════════════════════════════════════════════════════════════
#  Loading
# ═══════════════════════════════════════════════════════════════════════════


def total_days(meta: Mapping[str, Any]) -> int:
    """Day count of the financial sheet, else inventory, else ``total_days``."""
    sheets = meta.get("sheets") or {}
    for name in (FINANCE_SHEET, INVENTORY_SHEET):
        days = (sheets.get(name) or {}).get("days")
        if days:
            return int(days)
    return int(meta.get("total_days") or FALLBACK_DAYS)


def _sheet_frame(records: Sequence[DayRecord], columns: Mapping[str, str]) -> pd.DataFrame:
    rows = {r.day: {col: r.number(key) for col, key in columns.items()} for r in records}
    return pd.DataFrame.from_dict(rows, orient="index", columns=list(columns), dtype="float64")


def build_frame(
    finance: Sequence[DayRecord],
    inventory: Sequence[DayRecord],
) -> pd.DataFrame | None:
    """Outer-join both sheets on day; None unless both have records.

    Interest defaults to 0 on days with a finance row, dispatches to 0 on
    every day.
    """
    if not finance or not inventory:
        return None
    fin = _sheet_frame(finance, FINANCE_COLUMNS)
    fin["interest_earned"] = fin["interest_earned"].fillna(0.0)
    inv = _sheet_frame(inventory, INVENTORY_COLUMNS)

    df = fin.join(inv, how="outer").sort_index()
    df["dispatches"] = df["dispatches"].fillna(0.0)
    df.index = df.index.astype(int)
    df.index.name = "day"
    return df


def finance_inventory_frame(store: DayStore) -> pd.DataFrame | None:
    """Load the financial and inventory sheets of *store* as one frame.

    Raises FileNotFoundError when the store has no meta.json.
    """
    days = total_days(store.read_meta())
    finance = store.load_scenario_data(FINANCE_SHEET, 0, days - 1)
    inventory = store.load_scenario_data(INVENTORY_SHEET, 0, days - 1)
    log.info(
        "Loaded %d financial and %d inventory records (of %d days)",
        len(finance), len(inventory), days,
    )
    return build_frame(finance, inventory)


# ═══════════════════════════════════════════════════════════════════════════
#  KPIs
# ═══════════════════════════════════════════════════════════════════════════


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _last_or_zero(series: pd.Series) -> float:
    present = series.dropna()
    return float(present.iloc[-1]) if not present.empty else 0.0


def finance_kpis(df: pd.DataFrame) -> FinanceKpis:
    inventory = df["inventory_level"]
    cash = df["cash_on_hand"]
    total_sales = _last_or_zero(df["sales_standard"]) + _last_or_zero(df["sales_custom"])
    final_cost = _last_or_zero(df["inventory_costs"])
    return FinanceKpis(
        stockout_days=int((inventory <= 0).sum()),
        avg_inventory_level=_round_half_up(inventory.mean()) if inventory.notna().any() else 0,
        avg_cash_on_hand=_round_half_up(cash.mean()) if cash.notna().any() else 0,
        inventory_cost_pct=round(final_cost / total_sales * 100, 2) if total_sales > 0 else 0.0,
        reorder_events=int((df["dispatches"] > 0).sum()),
    )


# ═══════════════════════════════════════════════════════════════════════════
#  Charts
# ═══════════════════════════════════════════════════════════════════════════


def _series(df: pd.DataFrame, column: str, name: str, highlight: bool = False) -> dict[str, Any]:
    return {
        "id": column,
        "name": name,
        "values": [None if pd.isna(v) else float(v) for v in df[column]],
        "highlight": highlight,
    }


def finance_charts(df: pd.DataFrame) -> dict[str, dict[str, Any]]:
    """Inventory vs cash (with reorder days), cost accumulation, sales."""
    labels = [int(d) for d in df.index]
    return {
        "inventory_cash": {
            "labels": labels,
            "series": [
                _series(df, "inventory_level", "Inventory Level"),
                _series(df, "cash_on_hand", "Cash On Hand"),
            ],
            "reorder_days": [int(d) for d in df.index[df["dispatches"] > 0]],
        },
        "cost_accumulation": {
            "labels": labels,
            "series": [
                _series(df, "inventory_costs", "Inventory Costs"),
                _series(df, "ordering_costs", "Ordering Costs"),
                _series(df, "salaries", "Salaries", highlight=True),
                _series(df, "interest_earned", "Interest Earned"),
            ],
        },
        "sales": {
            "labels": labels,
            "series": [
                _series(df, "sales_standard", "Sales Standard"),
                _series(df, "sales_custom", "Sales Custom"),
            ],
        },
    }
