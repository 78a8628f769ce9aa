"""Tests for the CSV record codec."""

from __future__ import annotations

import logging
from datetime import date, timedelta

import pytest

from activity_tracker.codec import (
    append_rows,
    day_pairs,
    decode,
    encode,
    encode_and_append,
    parse_date,
    parse_effort,
)
from activity_tracker.model import Day, Entry
from activity_tracker.stores.memory import MemoryLogStore


def _entries(days: dict[date, Day]) -> dict[date, list[Entry]]:
    return {
        d: sorted(day.entries, key=lambda e: (e.description, e.duration))
        for d, day in days.items()
    }


def test_decode_empty() -> None:
    result = decode(b"")
    assert result.days == {}
    assert result.skipped == []


def test_decode_groups_entries_by_date() -> None:
    data = (
        b"2024-06-17,1h0m0s,0.80,run\n"
        b"2024-06-16,30m0s,0.40,walk\n"
        b"2024-06-17,15m0s,0.55,stretch\n"
    )
    result = decode(data)
    assert set(result.days) == {date(2024, 6, 17), date(2024, 6, 16)}
    assert len(result.days[date(2024, 6, 17)].entries) == 2
    walk = result.days[date(2024, 6, 16)].entries[0]
    assert walk == Entry(duration=timedelta(minutes=30), effort=0.4, description="walk")


def test_decode_skips_row_with_three_fields(caplog: pytest.LogCaptureFixture) -> None:
    data = b"2024-06-17,1h0m0s,0.80\n2024-06-16,30m,0.40,walk\n"
    with caplog.at_level(logging.WARNING, logger="activity_tracker.codec"):
        result = decode(data)
    assert list(result.days) == [date(2024, 6, 16)]
    assert len(result.skipped) == 1
    assert result.skipped[0].line == 1
    assert "expected 4 fields" in result.skipped[0].reason
    assert "Skipping row at line 1" in caplog.text


@pytest.mark.parametrize(
    "row",
    [
        b"2024-13-01,1h,0.5,bad month",
        b"17/06/2024,1h,0.5,bad format",
        b"2024-06-17,an hour,0.5,bad duration",
        b"2024-06-17,-1h,0.5,negative duration",
        b"2024-06-17,1h,high,bad effort",
        b"2024-06-17,1h,nan,nan effort",
        b"2024-06-17,1h,0.5,too,many",
        b"2024-06-17,99999999999h,0.5,huge duration",
        b"2024-06-17, 1h,0.5,padded duration",
        b"2024-06-17,1h, 0.5,padded effort",
        b"2024-06-17,1h,1_0,underscore effort",
        b"2024-06-17,1h,1e999,overflowing effort",
        b"2024-06-17,1h,inf,inf effort",
    ],
)
def test_decode_skips_malformed_rows(row: bytes) -> None:
    data = row + b"\n2024-06-10,20m0s,0.60,ok\n"
    result = decode(data)
    assert list(result.days) == [date(2024, 6, 10)]
    assert len(result.skipped) == 1
    assert result.skipped[0].fields == tuple(row.decode().split(","))


def test_decode_ignores_blank_lines_and_tracks_line_numbers() -> None:
    data = b'2024-06-17,1h,0.8,"multi\nline"\n\n2024-06-17,1h,0.8\n'
    result = decode(data)
    assert result.days[date(2024, 6, 17)].entries[0].description == "multi\nline"
    assert [s.line for s in result.skipped] == [4]


def test_decode_accepts_effort_outside_unit_range() -> None:
    result = decode(b"2024-06-17,10m,1.50,over\n2024-06-17,10m,-0.25,under\n")
    efforts = sorted(e.effort for e in result.days[date(2024, 6, 17)].entries)
    assert efforts == [-0.25, 1.5]


def test_encode_formats_fields() -> None:
    out = encode(
        [
            (date(2024, 6, 17), Entry(timedelta(hours=1, minutes=30), 0.8, "run")),
            (date(2024, 6, 16), Entry(timedelta(0), 0.333, "")),
        ]
    )
    assert out == b"2024-06-17,1h30m0s,0.80,run\n2024-06-16,0s,0.33,\n"


def test_encode_quotes_delimiters() -> None:
    out = encode([(date(2024, 6, 17), Entry(timedelta(minutes=5), 0.5, 'a, "b"'))])
    assert out == b'2024-06-17,5m0s,0.50,"a, ""b"""\n'


def test_round_trip_preserves_days() -> None:
    days = [
        Day(
            day=date(2024, 6, 17),
            entries=(
                Entry(timedelta(hours=1), 0.75, "bike, hills"),
                Entry(timedelta(minutes=20, seconds=5), 0.5, 'said "hi"'),
            ),
        ),
        Day(
            day=date(2024, 6, 3),
            entries=(Entry(timedelta(milliseconds=1500), 0.1, "line one\nline two"),),
        ),
    ]
    result = decode(encode(day_pairs(days)))
    assert result.skipped == []
    assert _entries(result.days) == _entries({d.day: d for d in days})


def test_append_rows_keeps_existing_bytes() -> None:
    existing = b"2024-06-16,30m0s,0.40,walk"
    pair = (date(2024, 6, 17), Entry(timedelta(hours=1), 0.8, "run"))
    out = append_rows(existing, [pair])
    assert out.startswith(existing)
    assert out == existing + b"\n2024-06-17,1h0m0s,0.80,run\n"
    assert append_rows(b"", [pair]) == b"2024-06-17,1h0m0s,0.80,run\n"


def test_encode_and_append_writes_after_existing_content() -> None:
    store = MemoryLogStore(b"2024-06-16,30m0s,0.40,walk\n")
    encode_and_append(
        [(date(2024, 6, 17), Entry(timedelta(hours=1), 0.8, "run"))], store
    )
    assert store.read_all() == (
        b"2024-06-16,30m0s,0.40,walk\n2024-06-17,1h0m0s,0.80,run\n"
    )
    assert set(decode(store.read_all()).days) == {
        date(2024, 6, 16),
        date(2024, 6, 17),
    }


def test_encode_and_append_nothing_is_noop() -> None:
    store = MemoryLogStore(b"partial")
    encode_and_append([], store)
    assert store.read_all() == b"partial"


def test_parse_date_strict() -> None:
    assert parse_date("2024-06-02") == date(2024, 6, 2)
    for bad in ("2024-6-2", "20240602", "2024-02-30", "", " 2024-06-02"):
        with pytest.raises(ValueError):
            parse_date(bad)


def test_decode_survives_oversized_duration() -> None:
    data = b"2024-06-16,99999999999h,0.5,huge\n2024-06-17,1h,0.5,ok\n"
    result = decode(data)
    assert list(result.days) == [date(2024, 6, 17)]
    assert [s.line for s in result.skipped] == [1]
    assert "invalid duration" in result.skipped[0].reason


def test_parse_effort_strict() -> None:
    assert parse_effort("0.75") == 0.75
    assert parse_effort("-.5") == -0.5
    assert parse_effort("1e-1") == 0.1
    assert parse_effort("2.") == 2.0
    for bad in ("", " 0.5", "0.5 ", "1_0", "nan", "inf", "-Infinity", "1e999", "0x1"):
        with pytest.raises(ValueError, match="invalid effort"):
            parse_effort(bad)


def test_encode_rejects_non_finite_effort() -> None:
    store = MemoryLogStore(b"")
    pair = (date(2024, 6, 17), Entry(timedelta(hours=1), float("nan"), "x"))
    with pytest.raises(ValueError, match="finite"):
        encode_and_append([pair], store)
    assert store.read_all() == b""
