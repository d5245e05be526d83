"""Bottleneck Analyzer — heuristic primary-bottleneck diagnosis per scenario.

Modules
───────
  config     — immutable thresholds / weights / scenario overrides (+ YAML)
  extractor  — DayRecords → QueueFeature / ProcessFeature
  scorer     — weighted rules → BottleneckVerdict with critical window
  payload    — verdict + features → chart-ready tab JSON
  reporter   — write dashboard JSON, TXT summary, PNG plots
  pipeline   — orchestrate load → extract → score → build → report
  cli        — argparse entry-point
"""
