"""
History operations: upsert by date, delete by id, and the DataFrame view.

A history is a plain sequence of Entry objects, unique by date. Nothing here
mutates its input; every operation returns a new list.
"""

from collections import Counter
from dataclasses import replace
from typing import List, Sequence

import pandas as pd

from neurotrack.entry import Entry, SCORED_FIELDS, SENSITIVITY_CHANNELS


FRAME_COLUMNS = (
    ("id", "date")
    + SCORED_FIELDS
    + SENSITIVITY_CHANNELS
    + ("sensitivity_mean", "social", "exposure", "exercise")
)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def upsert_entry(history: Sequence[Entry], entry: Entry) -> List[Entry]:
    """
    Insert `entry`, or replace the entry that already holds its date.

    A replaced entry keeps its original id and its position in the history.
    """
    updated = list(history)
    for i, existing in enumerate(updated):
        if existing.date == entry.date:
            updated[i] = replace(entry, id=existing.id)
            return updated
    updated.append(entry)
    return updated


def delete_entry(history: Sequence[Entry], entry_id: str) -> List[Entry]:
    """Return the history without the entry carrying `entry_id`."""
    return [e for e in history if e.id != entry_id]


def ensure_unique_dates(history: Sequence[Entry]) -> None:
    """Raise ValueError if two entries share a date."""
    counts = Counter(e.date for e in history)
    duplicates = sorted(d for d, n in counts.items() if n > 1)
    if duplicates:
        raise ValueError(f"History has more than one entry for: {duplicates}")


# ---------------------------------------------------------------------------
# Tabular view
# ---------------------------------------------------------------------------

def history_frame(history: Sequence[Entry]) -> pd.DataFrame:
    """
    One row per entry, in history order, with flat sensitivity columns.

    The `date` column is parsed to datetime (midnight, naive UTC). An empty
    history still yields every column so downstream filters work unchanged.
    """
    rows = [
        {
            "id": e.id,
            "date": e.date,
            **{name: getattr(e, name) for name in SCORED_FIELDS},
            **e.sensitivity.to_record(),
            "sensitivity_mean": e.sensitivity_mean,
            "social": e.social,
            "exposure": e.exposure,
            "exercise": e.exercise,
        }
        for e in history
    ]

    df = pd.DataFrame(rows, columns=list(FRAME_COLUMNS))
    df["date"] = pd.to_datetime(df["date"])
    return df
