"""Таблиця статистики по серіях."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

_COL_LABELS = {
    "name": "Series",
    "days": "Days",
    "min": "Min",
    "mean": "Mean",
    "max": "Max",
    "bottleneck": "Bottleneck",
}

_COL_CONFIG = {
    "Min": colcfg.NumberColumn("Min", format="%.2f"),
    "Mean": colcfg.NumberColumn("Mean", format="%.2f"),
    "Max": colcfg.NumberColumn("Max", format="%.2f"),
    "Bottleneck": colcfg.CheckboxColumn("Bottleneck"),
}


def render_series_table(df: pd.DataFrame, key: str) -> None:
    """Рендерить підсумок серій одного графіка; рядок вузького місця першим."""
    if df.empty:
        st.info("No series to display.")
        return

    view = df.reset_index(drop=True).rename(columns=_COL_LABELS)
    st.dataframe(
        view,
        hide_index=True,
        width="stretch",
        height=min(len(view) * 36 + 42, 400),
        column_config=_COL_CONFIG,
        key=key,
    )
