"""Bottleneck contracts — canonical data structures shared by all modules."""

from src.contracts.day_record import DayRecord, TimeSeries
from src.contracts.enums import BottleneckType, MetricKind
from src.contracts.features import ProcessFeature, QueueFeature
from src.contracts.verdict import BottleneckVerdict, TimeWindow
from src.contracts.workbook import HISTORY_SHEET, ParsedWorkbook

__all__ = [
    "BottleneckType",
    "BottleneckVerdict",
    "DayRecord",
    "HISTORY_SHEET",
    "MetricKind",
    "ParsedWorkbook",
    "ProcessFeature",
    "QueueFeature",
    "TimeSeries",
    "TimeWindow",
]
