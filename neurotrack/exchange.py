"""
History exchange formats: JSON and CSV export, validated import.

Imports are all-or-nothing. Every record is checked and built before the
new history is returned, so a caller that assigns the result never ends up
with a half-replaced history.
"""

import csv
import io
import json
import logging
from typing import List, Mapping, Sequence

import pandas as pd

from neurotrack.config import NeuroTrackConfig, DEFAULT_CONFIG
from neurotrack.entry import Entry, SCORED_FIELDS, SENSITIVITY_CHANNELS
from neurotrack.history import ensure_unique_dates

logger = logging.getLogger(__name__)


REQUIRED_KEYS = {"date"} | set(SCORED_FIELDS)
TOKEN_FIELDS = ("triggers", "helps")

CSV_COLUMNS = (
    ("id", "date")
    + SCORED_FIELDS
    + SENSITIVITY_CHANNELS
    + ("social", "exposure", "exercise", "meds", "triggers", "helps", "notes")
)

TOKEN_DELIMITER = "|"
ESCAPE = "\\"


class InvalidHistoryError(ValueError):
    """Raised when an import payload is not a well-formed sequence of entries."""


def _reject(reason: str) -> InvalidHistoryError:
    logger.warning("Rejected history import: %s", reason)
    return InvalidHistoryError(reason)


# ---------------------------------------------------------------------------
# Token list encoding (CSV only)
# ---------------------------------------------------------------------------

def join_tokens(tokens: Sequence[str]) -> str:
    """Join tokens with '|', backslash-escaping '|' and '\\' inside tokens."""
    return TOKEN_DELIMITER.join(
        t.replace(ESCAPE, ESCAPE * 2).replace(TOKEN_DELIMITER, ESCAPE + TOKEN_DELIMITER)
        for t in tokens
    )


def split_joined(text: str) -> List[str]:
    """Inverse of join_tokens."""
    if not text:
        return []

    tokens, current, escaped = [], [], False
    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == ESCAPE:
            escaped = True
        elif ch == TOKEN_DELIMITER:
            tokens.append("".join(current))
            current = []
        else:
            current.append(ch)
    tokens.append("".join(current))
    return tokens


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def export_json(history: Sequence[Entry]) -> str:
    """Indented JSON array of entry records."""
    return json.dumps([e.to_record() for e in history], ensure_ascii=False, indent=2)


def export_csv(history: Sequence[Entry]) -> str:
    """
    One quoted row per entry. Notes are kept verbatim; CSV quoting carries
    commas, quotes and newlines through unchanged.
    """
    rows = [
        {
            "id": e.id,
            "date": e.date,
            **{name: getattr(e, name) for name in SCORED_FIELDS},
            **e.sensitivity.to_record(),
            "social": e.social,
            "exposure": e.exposure,
            "exercise": e.exercise,
            "meds": e.meds,
            "triggers": join_tokens(e.triggers),
            "helps": join_tokens(e.helps),
            "notes": e.notes,
        }
        for e in history
    ]
    df = pd.DataFrame(rows, columns=list(CSV_COLUMNS))
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def parse_records(
    payload,
    cfg: NeuroTrackConfig | None = None,
) -> List[Entry]:
    """
    Validate a decoded payload and build the entries it describes.

    The payload must be a list of mappings, each with a date, mood, energy,
    sleep and a sensitivity block, with unique valid ISO dates. Triggers and
    helps, when present, must be a list or a comma-separated string.
    Numeric values are normalized like any other entry; ids are kept when
    present.
    """
    if cfg is None:
        cfg = DEFAULT_CONFIG

    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        raise _reject(f"expected a list of entries, got {type(payload).__name__}")

    entries: List[Entry] = []
    for i, record in enumerate(payload):
        if not isinstance(record, Mapping):
            raise _reject(f"record {i} is not an object")

        missing = REQUIRED_KEYS - set(record)
        if not isinstance(record.get("sensitivity", record.get("sens")), Mapping):
            missing.add("sensitivity")
        if missing:
            raise _reject(f"record {i} is missing {sorted(missing)}")

        for name in TOKEN_FIELDS:
            value = record.get(name)
            if value is not None and not isinstance(value, (str, list, tuple)):
                raise _reject(f"record {i}: {name} must be a list of strings")

        try:
            entries.append(Entry.from_record(record, cfg))
        except (TypeError, ValueError) as exc:
            raise _reject(f"record {i}: {exc}") from exc

    try:
        ensure_unique_dates(entries)
    except ValueError as exc:
        raise _reject(str(exc)) from exc

    logger.debug("Parsed %d history entries", len(entries))
    return entries


def import_json(text: str, cfg: NeuroTrackConfig | None = None) -> List[Entry]:
    """Parse a JSON export back into a history."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise _reject(f"not valid JSON ({exc.msg})") from exc
    return parse_records(payload, cfg)


def import_csv(text: str, cfg: NeuroTrackConfig | None = None) -> List[Entry]:
    """Parse a CSV export back into a history."""
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise _reject(f"not valid CSV ({exc})") from exc

    missing = (REQUIRED_KEYS | set(SENSITIVITY_CHANNELS)) - set(df.columns)
    if missing:
        raise _reject(f"CSV is missing columns {sorted(missing)}")

    records = []
    for row in df.to_dict(orient="records"):
        record = {k: v for k, v in row.items() if k not in SENSITIVITY_CHANNELS}
        record["sensitivity"] = {ch: row[ch] for ch in SENSITIVITY_CHANNELS}
        record["triggers"] = split_joined(row.get("triggers", ""))
        record["helps"] = split_joined(row.get("helps", ""))
        records.append(record)

    return parse_records(records, cfg)
