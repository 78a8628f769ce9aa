"""Modelos tipados para entradas de actividad, días y resumen semanal."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta


@dataclass(frozen=True)
class Entry:
    """One logged activity occurrence."""

    duration: timedelta
    effort: float
    description: str = ""


@dataclass(frozen=True)
class Day:
    """A calendar date and the entries logged for it (possibly none)."""

    day: date
    entries: tuple[Entry, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class UserProfile:
    """Datos del usuario usados para las referencias de frecuencia cardiaca."""

    username: str
    resting_heart_rate: float
    date_of_birth: date


@dataclass(frozen=True)
class Summary:
    """Weekly aggregate derived from a window of days (never persisted)."""

    resting_heart_rate: float
    low_intensity_sum: timedelta
    low_intensity_score: float
    moderate_intensity_heart_rate: float
    moderate_intensity_sum: timedelta
    moderate_intensity_score: float
    high_intensity_heart_rate: float
    high_intensity_sum: timedelta
    high_intensity_score: float
    combo_score: float
    remaining_moderate_time: timedelta
    target_hours: float
    bonus_level: float
