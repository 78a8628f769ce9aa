from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pandas as pd

from activity_tracker.model import Day, Entry, UserProfile
from activity_tracker.reconcile import reconcile
from activity_tracker.report import (
    WINDOW_COLUMNS,
    format_summary,
    format_window,
    window_to_frame,
)
from activity_tracker.scoring import ScoreConfig, summarize

PROFILE = UserProfile(
    username="ana", resting_heart_rate=60.0, date_of_birth=date(1984, 6, 17)
)


def _window() -> list[Day]:
    day = Day(
        day=date(2024, 6, 17),
        entries=(
            Entry(timedelta(hours=1, minutes=30), 0.8, "run"),
            Entry(timedelta(minutes=20), 0.3, "walk"),
        ),
    )
    return reconcile([day], date(2024, 6, 17))


def test_window_to_frame_rows_per_entry_and_empty_day() -> None:
    df = window_to_frame(_window(), ScoreConfig())
    assert list(df.columns) == WINDOW_COLUMNS
    # 2 entries on the first day + 13 empty days
    assert len(df) == 15
    assert list(df["level"][:2]) == ["vigorous", "light"]
    assert df.loc[0, "weekday"] == "lun"
    assert pd.isna(df.loc[2, "duration"])
    assert df.loc[2, "date"] == date(2024, 6, 16)


def test_window_to_frame_no_days() -> None:
    df = window_to_frame([], ScoreConfig())
    assert df.empty
    assert list(df.columns) == WINDOW_COLUMNS


def test_format_window_text() -> None:
    text = format_window(_window(), ScoreConfig())
    assert "1h30m0s" in text
    assert "0.80" in text
    assert "2024-06-04" in text
    assert format_window([], ScoreConfig()) == "(sin datos)"


def test_format_summary_text() -> None:
    now = datetime(2024, 6, 17, tzinfo=timezone.utc)
    summary = summarize(_window()[:7], PROFILE, now=now)
    text = format_summary(summary)
    assert "Puntaje combinado:     122.7 / 100" in text
    assert "Restante para meta:    0s" in text
    assert "bonus" not in text

    heavy = summarize(
        [Day(day=date(2024, 6, 17), entries=(Entry(timedelta(hours=1), 0.9, ""),))],
        PROFILE,
        now=now,
    )
    assert "Nivel bonus alcanzado (200)" in format_summary(heavy)
