"""Lectura y escritura del registro de actividad en formato CSV.

Cada fila es una entrada con cuatro campos: fecha (YYYY-MM-DD), duración con
sufijo de unidad, esfuerzo decimal y descripción libre.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from activity_tracker.durations import format_duration, parse_duration
from activity_tracker.model import Day, Entry
from activity_tracker.stores.base import LogStore

logger = logging.getLogger(__name__)

FIELD_COUNT = 4

_DATE_RX = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_EFFORT_RX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class SkippedRow:
    """Diagnostic for a row dropped while decoding."""

    line: int
    reason: str
    fields: tuple[str, ...]


@dataclass
class DecodeResult:
    """Decoded days keyed by date (no ordering guaranteed) plus skipped rows."""

    days: dict[date, Day] = field(default_factory=dict)
    skipped: list[SkippedRow] = field(default_factory=list)


def decode(data: bytes) -> DecodeResult:
    """Parse the full content of a log into days.

    Malformed rows are logged and skipped; the rest of the content is still
    decoded.

    Args:
        data: Complete log content (may be empty).

    Returns:
        Days grouped by date and the list of skipped rows.

    Raises:
        UnicodeDecodeError: If the content is not valid UTF-8.
    """
    text = data.decode("utf-8")
    entries_per_day: dict[date, list[Entry]] = {}
    skipped: list[SkippedRow] = []

    reader = csv.reader(io.StringIO(text, newline=""))
    line = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            start_line, line = line + 1, reader.line_num
            logger.warning("Skipping row at line %d: %s", start_line, exc)
            skipped.append(SkippedRow(start_line, str(exc), ()))
            continue
        start_line, line = line + 1, reader.line_num
        if not row:
            continue
        try:
            day, entry = _row_to_entry(row)
        except ValueError as exc:
            logger.warning("Skipping row at line %d: %s", start_line, exc)
            skipped.append(SkippedRow(start_line, str(exc), tuple(row)))
            continue
        entries_per_day.setdefault(day, []).append(entry)

    days = {d: Day(day=d, entries=tuple(e)) for d, e in entries_per_day.items()}
    return DecodeResult(days=days, skipped=skipped)


def encode(pairs: Iterable[tuple[date, Entry]]) -> bytes:
    """Serialize ``(date, entry)`` pairs as CSV rows (no header).

    Raises:
        ValueError: If an entry has a non-finite effort.
    """
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, lineterminator="\n")
    for day, entry in pairs:
        writer.writerow(_entry_to_row(day, entry))
    return buf.getvalue().encode("utf-8")


def append_rows(existing: bytes, pairs: Iterable[tuple[date, Entry]]) -> bytes:
    """Return ``existing`` untouched followed by the newly encoded rows."""
    return existing + _separator(existing) + encode(pairs)


def encode_and_append(pairs: Iterable[tuple[date, Entry]], store: LogStore) -> None:
    """Encode entries and append them to ``store``.

    Raises:
        OSError: Propagated from the store.
    """
    encoded = encode(pairs)
    if not encoded:
        return
    existing = store.read_all()
    store.append(_separator(existing) + encoded)
    logger.debug("Appended %d bytes to log", len(encoded))


def day_pairs(days: Iterable[Day]) -> list[tuple[date, Entry]]:
    """Flatten days into the ``(date, entry)`` pairs accepted by :func:`encode`."""
    return [(d.day, e) for d in days for e in d.entries]


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` date."""
    if not _DATE_RX.fullmatch(value):
        raise ValueError(f"invalid date: {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_effort(value: str) -> float:
    """Parse a plain finite decimal effort such as ``0.75`` or ``1e-1``."""
    if not _EFFORT_RX.fullmatch(value):
        raise ValueError(f"invalid effort: {value!r}")
    effort = float(value)
    if not math.isfinite(effort):
        raise ValueError(f"invalid effort: {value!r}")
    return effort


def _row_to_entry(row: list[str]) -> tuple[date, Entry]:
    if len(row) != FIELD_COUNT:
        raise ValueError(f"expected {FIELD_COUNT} fields, got {len(row)}")
    date_str, duration_str, effort_str, description = row

    day = parse_date(date_str)
    duration = parse_duration(duration_str)
    effort = parse_effort(effort_str)

    return day, Entry(duration=duration, effort=effort, description=description)


def _entry_to_row(day: date, entry: Entry) -> list[str]:
    if not math.isfinite(entry.effort):
        raise ValueError(f"effort must be finite, got {entry.effort!r}")
    return [
        f"{day:%Y-%m-%d}",
        format_duration(entry.duration),
        f"{entry.effort:.2f}",
        entry.description,
    ]


def _separator(existing: bytes) -> bytes:
    if existing and not existing.endswith(b"\n"):
        return b"\n"
    return b""
