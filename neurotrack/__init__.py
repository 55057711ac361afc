"""
NeuroTrack v1.0 — Daily Self-Observation Risk Engine

A deterministic, interpretable engine that turns a history of daily
self-observations (mood, energy, sleep, sensory sensitivity, social load,
triggers) into a short-term risk indicator and simple trend summaries.

Architecture:
    config      — Clamp bounds, windows, weights, thresholds, trigger tips
    entry       — Entry model and input normalization
    history     — Upsert / delete by date and id, DataFrame view
    aggregator  — Trailing 7-day window statistics and daily series
    risk        — Risk score and rationale
    triggers    — Trigger ranking and tip lookup
    exchange    — JSON / CSV export and validated import
    pipeline    — Orchestration: load → window → score → triggers → report

Public API:
    analyze(filepath, now)        → CLI mode
    analyze_history(history, now) → UI / backend mode
    generate_report(result)       → formatted report
"""

from neurotrack.entry import Entry, make_entry
from neurotrack.history import upsert_entry, delete_entry
from neurotrack.exchange import InvalidHistoryError
from neurotrack.pipeline import analyze, analyze_history, generate_report

__version__ = "1.0.0"

__all__ = [
    "Entry",
    "make_entry",
    "upsert_entry",
    "delete_entry",
    "InvalidHistoryError",
    "analyze",
    "analyze_history",
    "generate_report",
]
