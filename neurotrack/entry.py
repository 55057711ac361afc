"""
Entry model: one day's self-observation, normalized at construction.

Numeric inputs never raise. Anything unparsable (None, "", "abc", NaN)
becomes 0 before clamping, so every scored field ends up in the clamp range
whatever the form collaborator hands over.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, Mapping, Tuple

import numpy as np

from neurotrack.config import NeuroTrackConfig, DEFAULT_CONFIG


SENSITIVITY_CHANNELS = ("sound", "light", "touch", "smell")
SCORED_FIELDS = ("mood", "energy", "sleep")


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------

def _to_float(value) -> float:
    """Parse a raw numeric input; unparsable or NaN input becomes 0.0."""
    try:
        number = float(value)
    except OverflowError:
        # ints beyond float range saturate to +/-inf, then clamp
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def clamp_score(value, lower: float = 0.0, upper: float = 10.0) -> float:
    """Coerce to a number and clamp into [lower, upper]."""
    return float(np.clip(_to_float(value), lower, upper))


def coerce_non_negative(value) -> float:
    """Coerce to a number with a floor at 0 and no ceiling (used for exercise)."""
    return max(0.0, _to_float(value))


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round half away from zero for non-negative values (7.5 -> 8, 6.25 -> 6.3).

    The scaled value is snapped to 9 decimals first so that sums such as
    3.5 + 1.6 + 0.4 + 2.0 land on the half they represent.
    """
    scale = 10 ** digits
    snapped = round(value * scale, 9)
    return math.floor(snapped + 0.5) / scale


# ---------------------------------------------------------------------------
# Token lists
# ---------------------------------------------------------------------------

def split_tokens(raw) -> Tuple[str, ...]:
    """
    Normalize a trigger/help field.

    A string is split on commas; any other iterable is taken token by token,
    and any other scalar is a single token.
    Tokens are trimmed and empty ones dropped. Order and duplicates are kept.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, Iterable):
        parts = [str(part) for part in raw]
    else:
        parts = [str(raw)]
    return tuple(part.strip() for part in parts if part.strip())


def parse_iso_date(value) -> str:
    """Return `value` as a YYYY-MM-DD string, raising ValueError if it is not a date."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except ValueError as exc:
        raise ValueError(f"Invalid entry date: {value!r}") from exc


def _text(value) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Categorical labels
# ---------------------------------------------------------------------------

class Exposure(str, Enum):
    """Sensory exposure expected for the day. Unknown labels fall back to LOW."""

    HIGH = "alta"
    MEDIUM = "média"
    LOW = "baixa"

    @classmethod
    def from_label(cls, label: str | None) -> "Exposure":
        try:
            return cls(label)
        except ValueError:
            return cls.LOW


class SocialLoad(str, Enum):
    """Social interaction load. Only DRAINING carries a signal; everything else is OTHER."""

    DRAINING = "desgastante"
    OTHER = "outro"

    @classmethod
    def from_label(cls, label: str | None) -> "SocialLoad":
        if label == cls.DRAINING.value:
            return cls.DRAINING
        return cls.OTHER


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Sensitivity:
    """Four sensory sensitivity sub-scores, each already clamped."""

    sound: float = 0.0
    light: float = 0.0
    touch: float = 0.0
    smell: float = 0.0

    @property
    def total(self) -> float:
        return self.sound + self.light + self.touch + self.smell

    @property
    def mean(self) -> float:
        return self.total / len(SENSITIVITY_CHANNELS)

    @classmethod
    def from_raw(cls, raw: Mapping, cfg: NeuroTrackConfig = DEFAULT_CONFIG) -> "Sensitivity":
        c = cfg.clamp
        return cls(**{
            channel: clamp_score(raw.get(channel), c.lower, c.upper)
            for channel in SENSITIVITY_CHANNELS
        })

    def to_record(self) -> Dict[str, float]:
        return {channel: getattr(self, channel) for channel in SENSITIVITY_CHANNELS}


@dataclass(frozen=True)
class Entry:
    """One day's observation. Immutable; replacing a day means building a new Entry."""

    id: str
    date: str
    mood: float = 0.0
    energy: float = 0.0
    sleep: float = 0.0
    sensitivity: Sensitivity = field(default_factory=Sensitivity)
    social: str = ""
    exposure: str = ""
    exercise: float = 0.0
    meds: str = ""
    triggers: Tuple[str, ...] = ()
    helps: Tuple[str, ...] = ()
    notes: str = ""

    @property
    def exposure_level(self) -> Exposure:
        return Exposure.from_label(self.exposure)

    @property
    def social_load(self) -> SocialLoad:
        return SocialLoad.from_label(self.social)

    @property
    def sensitivity_mean(self) -> float:
        return self.sensitivity.mean

    def to_record(self) -> Dict:
        """Plain-dict form used by the exchange formats."""
        return {
            "id": self.id,
            "date": self.date,
            "mood": self.mood,
            "energy": self.energy,
            "sleep": self.sleep,
            "sensitivity": self.sensitivity.to_record(),
            "social": self.social,
            "exposure": self.exposure,
            "exercise": self.exercise,
            "meds": self.meds,
            "triggers": list(self.triggers),
            "helps": list(self.helps),
            "notes": self.notes,
        }

    @classmethod
    def from_record(cls, record: Mapping, cfg: NeuroTrackConfig = DEFAULT_CONFIG) -> "Entry":
        """Rebuild an entry from a stored record, keeping its id when it has one."""
        entry_id = record.get("id") or str(uuid.uuid4())
        return _build_entry(record, str(entry_id), parse_iso_date(record.get("date")), cfg)


def _sensitivity_block(raw: Mapping) -> Mapping:
    """Accept `sensitivity`, the legacy `sens` key, or flat `sens_<channel>` keys."""
    block = raw.get("sensitivity", raw.get("sens"))
    if isinstance(block, Mapping):
        return block
    return {channel: raw.get(f"sens_{channel}") for channel in SENSITIVITY_CHANNELS}


def _build_entry(raw: Mapping, entry_id: str, entry_date: str, cfg: NeuroTrackConfig) -> Entry:
    c = cfg.clamp
    return Entry(
        id=entry_id,
        date=entry_date,
        **{name: clamp_score(raw.get(name), c.lower, c.upper) for name in SCORED_FIELDS},
        sensitivity=Sensitivity.from_raw(_sensitivity_block(raw), cfg),
        social=_text(raw.get("social")),
        exposure=_text(raw.get("exposure")),
        exercise=coerce_non_negative(raw.get("exercise")),
        meds=_text(raw.get("meds")),
        triggers=split_tokens(raw.get("triggers")),
        helps=split_tokens(raw.get("helps")),
        notes=_text(raw.get("notes")),
    )


def make_entry(
    raw: Mapping,
    today=None,
    cfg: NeuroTrackConfig | None = None,
    id_factory: Callable[[], object] = uuid.uuid4,
) -> Entry:
    """
    Build a normalized Entry from raw form values.

    Always assigns a fresh id. A missing date defaults to `today`, or to the
    current UTC date when `today` is not given. An unparsable date raises
    ValueError; unparsable numbers never do.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    raw_date = raw.get("date")
    if not raw_date:
        raw_date = today if today is not None else datetime.now(timezone.utc).date()

    return _build_entry(raw, str(id_factory()), parse_iso_date(raw_date), cfg)
