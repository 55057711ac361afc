"""
Risk scoring: window statistics + today's entry -> bounded score and rationale.

The score is a relative heuristic in [0, 10], not a calibrated probability.
Rounding is half up (7.5 -> 8), then capped at `weights.score_cap`.
"""

from dataclasses import dataclass
from typing import Tuple

from neurotrack.aggregator import WindowStats
from neurotrack.config import NeuroTrackConfig, DEFAULT_CONFIG
from neurotrack.entry import Entry, Exposure, round_half_up


NO_DATA_LABEL = "no data yet"
STABLE_LABEL = "stable"

HIGH_SENSITIVITY_LABEL = "high sensitivity"
LOW_SLEEP_LABEL = "low sleep"
DRAINING_LABEL = "draining interactions"
EXPOSURE_LABEL = "elevated sensory exposure"


@dataclass(frozen=True)
class RiskAssessment:
    """Score is None when there is no data in the window."""

    score: int | None
    rationale: Tuple[str, ...]
    base: float | None = None

    @property
    def has_data(self) -> bool:
        return self.score is not None

    def describe(self) -> str:
        return ", ".join(self.rationale)


def exposure_weight(entry: Entry | None, cfg: NeuroTrackConfig | None = None) -> int:
    """Weight of today's exposure label; 0 without an entry for today."""
    if cfg is None:
        cfg = DEFAULT_CONFIG
    if entry is None:
        return cfg.exposure.low

    ew = cfg.exposure
    return {
        Exposure.HIGH: ew.high,
        Exposure.MEDIUM: ew.medium,
        Exposure.LOW: ew.low,
    }[entry.exposure_level]


def score_risk(
    today: Entry | None,
    stats: WindowStats,
    cfg: NeuroTrackConfig | None = None,
) -> RiskAssessment:
    """
    Combine window aggregates and today's exposure into a risk assessment.

    base = 0.5 * avg_sensitivity + 0.8 * low_sleep_days
         + 0.4 * draining_interactions + 1.0 * exposure_weight

    Rationale labels are appended in a fixed order; with none, it is "stable".
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    if not stats.has_data:
        return RiskAssessment(score=None, rationale=(NO_DATA_LABEL,))

    w = cfg.weights
    t = cfg.thresholds
    exposure = exposure_weight(today, cfg)

    base = (
        stats.average_sensitivity * w.sensitivity
        + stats.low_sleep_days * w.low_sleep
        + stats.draining_interactions * w.draining
        + exposure * w.exposure
    )
    score = min(w.score_cap, int(round_half_up(base)))

    rationale = []
    if stats.average_sensitivity >= t.high_sensitivity:
        rationale.append(HIGH_SENSITIVITY_LABEL)
    if stats.low_sleep_days >= t.low_sleep_days:
        rationale.append(LOW_SLEEP_LABEL)
    if stats.draining_interactions >= t.draining_interactions:
        rationale.append(DRAINING_LABEL)
    if exposure > t.exposure_weight:
        rationale.append(EXPOSURE_LABEL)

    return RiskAssessment(
        score=score,
        rationale=tuple(rationale) or (STABLE_LABEL,),
        base=round(base, 3),
    )
