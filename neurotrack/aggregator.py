"""
Trailing-window aggregation over a history frame.

All functions are pure transforms over the DataFrame from
`history.history_frame`. The reference instant is always passed in;
nothing here reads the clock.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from neurotrack.config import NeuroTrackConfig, DEFAULT_CONFIG
from neurotrack.entry import Entry, SocialLoad, SENSITIVITY_CHANNELS, round_half_up


# ---------------------------------------------------------------------------
# Reference instant
# ---------------------------------------------------------------------------

def reference_instant(now) -> pd.Timestamp:
    """
    Normalize `now` (datetime, date, ISO string or Timestamp) to naive UTC.

    Entry dates are read as UTC midnight, so aware instants are converted to
    UTC before the timezone is dropped.
    """
    if now is None:
        raise ValueError("A reference instant is required")
    ts = pd.Timestamp(now)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def today_iso(now) -> str:
    """ISO calendar date of the reference instant."""
    return reference_instant(now).date().isoformat()


def find_today_entry(history: Sequence[Entry], now) -> Entry | None:
    """The entry dated today, if any. Dates are unique so there is at most one."""
    today = today_iso(now)
    return next((e for e in history if e.date == today), None)


# ---------------------------------------------------------------------------
# Window selection
# ---------------------------------------------------------------------------

def select_window(
    frame: pd.DataFrame,
    now,
    cfg: NeuroTrackConfig | None = None,
) -> pd.DataFrame:
    """
    Rows whose date lies at most `windows.days` x 24h before `now`.

    This is a duration comparison, not calendar truncation: with now at
    2026-01-10 12:00 the entry for 2026-01-03 is 7.5 days old and drops out,
    while 2026-01-04 stays. Future-dated entries have a negative age and
    are kept.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    ref = reference_instant(now)
    age = ref - frame["date"]
    return frame[age <= pd.Timedelta(days=cfg.windows.days)]


# ---------------------------------------------------------------------------
# Window statistics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowStats:
    """Aggregates over the trailing window. Averages are None when the window is empty."""

    size: int = 0
    average_sensitivity: float | None = None
    low_sleep_days: int = 0
    draining_interactions: int = 0
    average_mood: float | None = None

    @property
    def has_data(self) -> bool:
        return self.size > 0


def compute_window_stats(
    window: pd.DataFrame,
    cfg: NeuroTrackConfig | None = None,
) -> WindowStats:
    """
    Compute the window aggregates consumed by the risk scorer.

    average_sensitivity divides the sum of all sub-scores by 4 x window size,
    so every day and every sub-score weighs the same, zeros included.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    size = len(window)
    if size == 0:
        return WindowStats()

    sens_total = float(window[list(SENSITIVITY_CHANNELS)].to_numpy(dtype=np.float64).sum())
    average_sensitivity = sens_total / (len(SENSITIVITY_CHANNELS) * size)

    low_sleep_days = int((window["sleep"].astype(float) <= cfg.thresholds.low_sleep_score).sum())
    draining = int((window["social"] == SocialLoad.DRAINING.value).sum())
    average_mood = round_half_up(float(window["mood"].astype(float).mean()), 1)

    return WindowStats(
        size=size,
        average_sensitivity=average_sensitivity,
        low_sleep_days=low_sleep_days,
        draining_interactions=draining,
        average_mood=average_mood,
    )


# ---------------------------------------------------------------------------
# Daily trend series
# ---------------------------------------------------------------------------

def compute_daily_series(
    frame: pd.DataFrame,
    cfg: NeuroTrackConfig | None = None,
) -> pd.DataFrame:
    """
    Date-sorted mood and mean sensitivity per day, with time-based rolling means.

    Columns: date, mood, sensitivity_mean, mood_rolling_mean,
    sensitivity_rolling_mean. The rolling window spans `windows.days`
    calendar days, so gaps in logging shrink it instead of reaching further back.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    series = (
        frame[["date", "mood", "sensitivity_mean"]]
        .sort_values("date")
        .reset_index(drop=True)
        .astype({"mood": float, "sensitivity_mean": float})
    )

    rolled = (
        series.set_index("date")[["mood", "sensitivity_mean"]]
        .rolling(f"{cfg.windows.days}D", min_periods=1)
        .mean()
    )

    series["mood_rolling_mean"] = rolled["mood"].to_numpy()
    series["sensitivity_rolling_mean"] = rolled["sensitivity_mean"].to_numpy()
    return series
