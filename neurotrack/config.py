"""
Centralized configuration for clamp bounds, windows, weights, and thresholds.

Every tunable constant lives here, including the static trigger-tip table.
Engine functions take an optional config and fall back to these defaults.
"""

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Entry normalization
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClampParams:
    """Closed range that every scored field is clamped into."""

    lower: float = 0.0
    upper: float = 10.0

    def __post_init__(self):
        if self.lower >= self.upper:
            raise ValueError(
                f"Clamp lower bound must be below upper bound, got [{self.lower}, {self.upper}]"
            )


# ---------------------------------------------------------------------------
# Rolling window
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowParams:
    """Trailing window, measured as a duration back from the reference instant."""

    days: int = 7

    def __post_init__(self):
        if self.days <= 0:
            raise ValueError(f"Window must span at least one day, got {self.days}")


# ---------------------------------------------------------------------------
# Risk weights
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RiskWeights:
    """
    Linear weights of the risk base score.

    base = sensitivity * avg_sensitivity
         + low_sleep * low_sleep_days
         + draining * draining_interactions
         + exposure * exposure_weight
    """

    sensitivity: float = 0.5
    low_sleep: float = 0.8
    draining: float = 0.4
    exposure: float = 1.0

    # Final score is capped here; there is no floor because all terms are >= 0
    score_cap: int = 10

    def __post_init__(self):
        for name in ("sensitivity", "low_sleep", "draining", "exposure"):
            if getattr(self, name) < 0:
                raise ValueError(f"Risk weight '{name}' must be non-negative")


@dataclass(frozen=True)
class ExposureWeights:
    """Weight contributed by today's sensory exposure label."""

    high: int = 2
    medium: int = 1
    low: int = 0


# ---------------------------------------------------------------------------
# Rationale thresholds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RationaleThresholds:
    """Conditions that add a label to the risk rationale."""

    # Days with sleep at or below this count as low-sleep days
    low_sleep_score: float = 5.0

    high_sensitivity: float = 6.0     # avg_sensitivity >= this
    low_sleep_days: int = 2           # low_sleep_days >= this
    draining_interactions: int = 2    # draining_interactions >= this
    exposure_weight: int = 0          # exposure_weight > this


# ---------------------------------------------------------------------------
# Trigger tips (declarative)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TriggerTip:
    """Canned coping advice for one known trigger (matched case-insensitively)."""

    trigger: str
    tip: str


DEFAULT_TRIGGER_TIPS: tuple = (
    TriggerTip(
        trigger="barulho",
        tip="Prepare fone com cancelamento e rotas silenciosas.",
    ),
    TriggerTip(
        trigger="multidão",
        tip="Evite horários de pico; combine saídas com ponto de fuga.",
    ),
    TriggerTip(
        trigger="luz",
        tip="Óculos escuros/boné e apps de temperatura de cor.",
    ),
    TriggerTip(
        trigger="calor",
        tip="Roupas leves, água e locais ventilados.",
    ),
)

DEFAULT_FALLBACK_TIP = "Planeje um “pit stop” e recursos sensoriais à mão."


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NeuroTrackConfig:
    """Complete engine configuration. Pass to any engine function to override defaults."""

    clamp: ClampParams = field(default_factory=ClampParams)
    windows: WindowParams = field(default_factory=WindowParams)
    weights: RiskWeights = field(default_factory=RiskWeights)
    exposure: ExposureWeights = field(default_factory=ExposureWeights)
    thresholds: RationaleThresholds = field(default_factory=RationaleThresholds)
    trigger_tips: tuple = DEFAULT_TRIGGER_TIPS
    fallback_tip: str = DEFAULT_FALLBACK_TIP


DEFAULT_CONFIG = NeuroTrackConfig()
