"""Vista de texto de la ventana de días y del resumen semanal."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from activity_tracker.durations import format_duration
from activity_tracker.model import Day, Summary
from activity_tracker.scoring import ScoreConfig, effort_level

_WEEKDAYS: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

WINDOW_COLUMNS = ["date", "weekday", "duration", "effort", "level", "description"]


def window_to_frame(days: Sequence[Day], config: ScoreConfig) -> pd.DataFrame:
    """One row per entry, in window order.

    - Días con entradas: una fila por entrada
    - Días vacíos: una fila con duración/esfuerzo vacíos
    """
    rows: list[dict[str, object]] = []
    for d in days:
        weekday = _WEEKDAYS[d.day.weekday()]
        if d.is_empty:
            rows.append(
                {
                    "date": d.day,
                    "weekday": weekday,
                    "duration": pd.NA,
                    "effort": pd.NA,
                    "level": "",
                    "description": "",
                }
            )
            continue
        for e in d.entries:
            rows.append(
                {
                    "date": d.day,
                    "weekday": weekday,
                    "duration": e.duration,
                    "effort": e.effort,
                    "level": effort_level(e.effort, config),
                    "description": e.description,
                }
            )
    if not rows:
        return pd.DataFrame(columns=WINDOW_COLUMNS)
    return pd.DataFrame(rows, columns=WINDOW_COLUMNS)


def format_window(days: Sequence[Day], config: ScoreConfig) -> str:
    """Render the window as a plain-text table."""
    df = window_to_frame(days, config)
    if df.empty:
        return "(sin datos)"
    out = df.copy()
    out["duration"] = out["duration"].map(
        lambda v: "" if pd.isna(v) else format_duration(v)
    )
    out["effort"] = out["effort"].map(lambda v: "" if pd.isna(v) else f"{v:.2f}")
    return out.to_string(index=False)


def format_summary(summary: Summary) -> str:
    """Render the summary as labelled lines."""
    lines = [
        f"Frecuencia en reposo:  {summary.resting_heart_rate:.0f} bpm",
        f"FC moderada desde:     {summary.moderate_intensity_heart_rate:.0f} bpm",
        f"FC alta desde:         {summary.high_intensity_heart_rate:.0f} bpm",
        (
            f"Baja intensidad:       {format_duration(summary.low_intensity_sum)}"
            f"  ({summary.low_intensity_score:.1f})"
        ),
        (
            f"Intensidad moderada:   {format_duration(summary.moderate_intensity_sum)}"
            f"  ({summary.moderate_intensity_score:.1f})"
        ),
        (
            f"Alta intensidad:       {format_duration(summary.high_intensity_sum)}"
            f"  ({summary.high_intensity_score:.1f})"
        ),
        f"Puntaje combinado:     {summary.combo_score:.1f} / 100",
        f"Restante para meta:    {format_duration(summary.remaining_moderate_time)}",
    ]
    if summary.combo_score >= summary.bonus_level:
        lines.append(f"Nivel bonus alcanzado ({summary.bonus_level:.0f})")
    return "\n".join(lines)
