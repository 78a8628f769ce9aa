"""Cálculo del puntaje semanal por intensidad y referencias cardiacas."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

import pandas as pd
from dateutil import tz

from activity_tracker.model import Day, Summary, UserProfile

SUMMARY_DAYS = 7

LOW = "low"
MODERATE = "moderate"
HIGH = "high"
BUCKETS: tuple[str, ...] = (LOW, MODERATE, HIGH)

_HOURS_PER_YEAR = 24 * 365
_LIGHT_FLOOR = 0.2


@dataclass(frozen=True)
class ScoreConfig:
    """Thresholds, weights and weekly target used by :func:`summarize`."""

    moderate_floor: float = 0.50
    high_floor: float = 0.70
    minimum_moderate_hours_per_week: float = 2.5
    low_weight: float = 0.2
    moderate_weight: float = 1.0
    high_weight: float = 2.0
    bonus_level: float = 200.0

    def __post_init__(self) -> None:
        if self.moderate_floor > self.high_floor:
            raise ValueError("moderate_floor must not exceed high_floor")
        if self.minimum_moderate_hours_per_week <= 0:
            raise ValueError("minimum_moderate_hours_per_week must be positive")

    def weight(self, bucket: str) -> float:
        return {
            LOW: self.low_weight,
            MODERATE: self.moderate_weight,
            HIGH: self.high_weight,
        }[bucket]


def classify_effort(effort: float, config: ScoreConfig) -> str:
    """Return the intensity bucket for an effort value."""
    if effort >= config.high_floor:
        return HIGH
    if effort >= config.moderate_floor:
        return MODERATE
    return LOW


def effort_level(effort: float, config: ScoreConfig) -> str:
    """Etiqueta de visualización (4 niveles) para un esfuerzo."""
    if effort >= config.high_floor:
        return "vigorous"
    if effort >= config.moderate_floor:
        return "moderate"
    if effort >= _LIGHT_FLOOR:
        return "light"
    return "minimal"


def entries_to_frame(days: Sequence[Day], config: ScoreConfig) -> pd.DataFrame:
    """Convert days to a DataFrame with one row per entry and its bucket."""
    rows = [
        {
            "date": d.day,
            "duration": e.duration,
            "effort": e.effort,
            "description": e.description,
            "bucket": classify_effort(e.effort, config),
        }
        for d in days
        for e in d.entries
    ]
    if not rows:
        return pd.DataFrame(
            columns=["date", "duration", "effort", "description", "bucket"]
        )
    return pd.DataFrame(rows)


def bucket_sums(frame: pd.DataFrame) -> dict[str, timedelta]:
    """Total duration per bucket; buckets without entries get zero."""
    sums = {bucket: timedelta(0) for bucket in BUCKETS}
    if frame.empty:
        return sums
    grouped = frame.groupby("bucket")["duration"].sum()
    for bucket, total in grouped.items():
        sums[str(bucket)] = pd.Timedelta(total).to_pytimedelta()
    return sums


def age_years(date_of_birth: date, now: datetime) -> float:
    """Age as hours since birth divided by hours in a 365-day year."""
    born = datetime.combine(date_of_birth, time.min, tzinfo=tz.UTC)
    return (now - born).total_seconds() / 3600 / _HOURS_PER_YEAR


def max_heart_rate(date_of_birth: date, now: datetime) -> float:
    """Estimated maximum heart rate, ``206.09 - 0.67 * age``."""
    return 206.09 - 0.67 * age_years(date_of_birth, now)


def summarize(
    days: Sequence[Day],
    profile: UserProfile,
    *,
    config: ScoreConfig | None = None,
    now: datetime | None = None,
) -> Summary:
    """Aggregate a window of days into weighted intensity scores.

    Args:
        days: Sub-window to score, normally the latest :data:`SUMMARY_DAYS`.
        profile: User profile for heart-rate references.
        config: Thresholds and weights (defaults when omitted).
        now: Reference instant for the age calculation (UTC now by default).

    Returns:
        Summary with per-bucket sums and scores normalized to the target.

    Raises:
        ValueError: If ``days`` is empty.
    """
    if not days:
        raise ValueError("cannot summarize an empty window")
    cfg = config or ScoreConfig()
    current = now or datetime.now(tz=tz.UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=tz.UTC)

    sums = bucket_sums(entries_to_frame(days, cfg))
    weighted = {
        bucket: cfg.weight(bucket) * sums[bucket].total_seconds() / 3600
        for bucket in BUCKETS
    }

    target = cfg.minimum_moderate_hours_per_week * len(days) / SUMMARY_DAYS

    remaining_minutes = 60 * (target - sum(weighted.values()))
    remaining = timedelta(minutes=max(0, math.floor(remaining_minutes)))

    scores = {bucket: value * 100 / target for bucket, value in weighted.items()}

    max_hr = max_heart_rate(profile.date_of_birth, current)
    return Summary(
        resting_heart_rate=profile.resting_heart_rate,
        low_intensity_sum=sums[LOW],
        low_intensity_score=scores[LOW],
        moderate_intensity_heart_rate=max_hr * cfg.moderate_floor,
        moderate_intensity_sum=sums[MODERATE],
        moderate_intensity_score=scores[MODERATE],
        high_intensity_heart_rate=max_hr * cfg.high_floor,
        high_intensity_sum=sums[HIGH],
        high_intensity_score=scores[HIGH],
        combo_score=sum(scores.values()),
        remaining_moderate_time=remaining,
        target_hours=target,
        bonus_level=cfg.bonus_level,
    )
