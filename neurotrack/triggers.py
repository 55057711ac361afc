"""
Trigger analysis: frequency ranking across the whole history and tip lookup.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from neurotrack.config import NeuroTrackConfig, DEFAULT_CONFIG
from neurotrack.entry import Entry


@dataclass(frozen=True)
class TriggerInsight:
    """Most frequent trigger and its tip. `top` is None when nothing was logged."""

    top: str | None
    tip: str
    count: int = 0


def rank_triggers(history: Sequence[Entry]) -> List[Tuple[str, int]]:
    """
    Count trigger tokens (case-sensitive), most frequent first.

    Ties keep first-encountered order, walking the history as given.
    """
    counts = Counter(token for entry in history for token in entry.triggers)
    # Counter keeps insertion order and sorted() is stable
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def top_trigger(history: Sequence[Entry]) -> str | None:
    ranking = rank_triggers(history)
    return ranking[0][0] if ranking else None


def tip_for_trigger(trigger: str | None, cfg: NeuroTrackConfig | None = None) -> str:
    """Case-insensitive lookup in the tip table; empty for no trigger, fallback for unknown."""
    if cfg is None:
        cfg = DEFAULT_CONFIG
    if not trigger:
        return ""

    wanted = trigger.casefold()
    for entry in cfg.trigger_tips:
        if entry.trigger.casefold() == wanted:
            return entry.tip
    return cfg.fallback_tip


def analyze_triggers(
    history: Sequence[Entry],
    cfg: NeuroTrackConfig | None = None,
) -> TriggerInsight:
    ranking = rank_triggers(history)
    if not ranking:
        return TriggerInsight(top=None, tip="")

    top, count = ranking[0]
    return TriggerInsight(top=top, tip=tip_for_trigger(top, cfg), count=count)
