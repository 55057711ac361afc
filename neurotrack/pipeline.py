"""
Pipeline orchestration: load → window → score → triggers → report.

This is the only module with file I/O. The analysis itself runs on an
in-memory history and an explicit reference instant.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Sequence, Union

from neurotrack.aggregator import (
    compute_window_stats,
    find_today_entry,
    select_window,
    today_iso,
)
from neurotrack.config import NeuroTrackConfig, DEFAULT_CONFIG
from neurotrack.entry import Entry
from neurotrack.exchange import import_json
from neurotrack.history import history_frame
from neurotrack.risk import score_risk
from neurotrack.triggers import analyze_triggers

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data loading (CLI mode only)
# ---------------------------------------------------------------------------

def load_history(
    filepath: Union[str, Path],
    cfg: NeuroTrackConfig | None = None,
) -> list[Entry]:
    """Load and validate a JSON history export."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"History file not found: {path}")

    history = import_json(path.read_text(encoding="utf-8"), cfg)
    logger.info("Loaded %d entries from %s", len(history), path)
    return history


# ---------------------------------------------------------------------------
# Core analysis (PURE FUNCTION — NO FILE I/O)
# ---------------------------------------------------------------------------

def analyze_history(
    history: Sequence[Entry],
    now,
    cfg: NeuroTrackConfig | None = None,
) -> Dict:
    """
    Run the engine over an in-memory history.

    Stateless. The history is read, never modified. `now` is the reference
    instant for both the trailing window and today's entry.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    # Stage 1: Window
    frame = history_frame(history)
    window = select_window(frame, now, cfg)
    stats = compute_window_stats(window, cfg)
    today = find_today_entry(history, now)

    # Stage 2: Risk
    risk = score_risk(today, stats, cfg)

    # Stage 3: Triggers (full history, independent of the window)
    triggers = analyze_triggers(history, cfg)

    logger.debug(
        "Window of %d entries, risk score %s, top trigger %r",
        stats.size, risk.score, triggers.top,
    )

    return {
        "today": today_iso(now),
        "risk": {
            "score": risk.score,
            "rationale": list(risk.rationale),
            "base": risk.base,
        },
        "window_size": stats.size,
        "average_mood": stats.average_mood,
        "average_sensitivity": (
            None if stats.average_sensitivity is None
            else round(stats.average_sensitivity, 3)
        ),
        "low_sleep_days": stats.low_sleep_days,
        "draining_interactions": stats.draining_interactions,
        "top_trigger": triggers.top,
        "trigger_count": triggers.count,
        "tip": triggers.tip,
    }


# ---------------------------------------------------------------------------
# Public Entry Points
# ---------------------------------------------------------------------------

def analyze(
    filepath: Union[str, Path],
    now=None,
    cfg: NeuroTrackConfig | None = None,
) -> Dict:
    """
    File-based entry point.

    `now` defaults to the current UTC time; this is the only place the
    clock is read.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    history = load_history(filepath, cfg)
    return analyze_history(history, now, cfg)


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def _show(value) -> str:
    return "-" if value is None else str(value)


def generate_report(result: Dict) -> str:
    """Format the analysis result as a human-readable text report."""
    risk = result["risk"]

    lines = [
        "NEUROTRACK STATUS REPORT",
        "=" * 58,
        "",
        f"  Date                  : {result['today']}",
        f"  Risk Score (0-10)     : {_show(risk['score'])}",
        f"  Why                   : {', '.join(risk['rationale'])}",
        "",
        f"  Entries (last 7d)     : {result['window_size']}",
        f"  Average Mood (7d)     : {_show(result['average_mood'])}",
        f"  Avg Sensitivity (7d)  : {_show(result['average_sensitivity'])}",
        f"  Low-Sleep Days        : {result['low_sleep_days']}",
        f"  Draining Interactions : {result['draining_interactions']}",
        "",
        f"  Top Trigger           : {_show(result['top_trigger'])}",
    ]

    if result["tip"]:
        lines.append(f"  Tip                   : {result['tip']}")

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
