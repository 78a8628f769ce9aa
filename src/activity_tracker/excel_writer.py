"""Exportación a Excel de la ventana de actividad y el resumen semanal."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from activity_tracker.model import Day, Summary
from activity_tracker.report import window_to_frame
from activity_tracker.scoring import ScoreConfig

_HEADER_MAP: dict[str, str] = {
    "date": "Fecha",
    "weekday": "Día",
    "duration": "Duración\n(min)",
    "effort": "Esfuerzo",
    "level": "Nivel",
    "description": "Descripción",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the exported workbook."""

    window_sheet: str = "Actividad"
    summary_sheet: str = "Resumen"


def _prepare_window(df: pd.DataFrame) -> pd.DataFrame:
    """Duración en minutos y columnas renombradas."""
    export_df = df.copy()
    export_df["duration"] = export_df["duration"].map(
        lambda v: None if pd.isna(v) else v.total_seconds() / 60
    )
    export_df["effort"] = export_df["effort"].map(
        lambda v: None if pd.isna(v) else float(v)
    )
    return export_df.rename(columns=_HEADER_MAP)


def _summary_rows(summary: Summary) -> pd.DataFrame:
    rows = [
        ("Frecuencia en reposo (bpm)", summary.resting_heart_rate),
        ("FC moderada desde (bpm)", summary.moderate_intensity_heart_rate),
        ("FC alta desde (bpm)", summary.high_intensity_heart_rate),
        ("Baja intensidad (min)", summary.low_intensity_sum.total_seconds() / 60),
        ("Baja intensidad (puntaje)", summary.low_intensity_score),
        (
            "Moderada (min)",
            summary.moderate_intensity_sum.total_seconds() / 60,
        ),
        ("Moderada (puntaje)", summary.moderate_intensity_score),
        ("Alta intensidad (min)", summary.high_intensity_sum.total_seconds() / 60),
        ("Alta intensidad (puntaje)", summary.high_intensity_score),
        ("Puntaje combinado", summary.combo_score),
        (
            "Restante para meta (min)",
            summary.remaining_moderate_time.total_seconds() / 60,
        ),
        ("Meta (horas ponderadas)", summary.target_hours),
    ]
    return pd.DataFrame(rows, columns=["Métrica", "Valor"])


def write_window_xlsx(
    days: Sequence[Day],
    summary: Summary,
    out_path: Path,
    layout: ExcelLayout,
    config: ScoreConfig | None = None,
) -> None:
    """Write the window and its summary to a formatted Excel file.

    Args:
        days: Reconciled window (descending).
        summary: Summary of the latest days.
        out_path: Output path for the XLSX file.
        layout: Sheet names.
        config: Thresholds used for the effort level column.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    window_df = _prepare_window(window_to_frame(days, config or ScoreConfig()))
    summary_df = _summary_rows(summary)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        window_df.to_excel(writer, index=False, sheet_name=layout.window_sheet)
        summary_df.to_excel(writer, index=False, sheet_name=layout.summary_sheet)
        _format_sheet(writer.book[layout.window_sheet])
        _format_summary_sheet(writer.book[layout.summary_sheet])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica borde y alineación a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, widths: Sequence[tuple[str, int]]) -> None:
    col_index = _get_header_col_index(ws)
    for header, width in widths:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, fmt_map: dict[str, str]) -> None:
    col_index = _get_header_col_index(ws)
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to the window sheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_widths(
        ws,
        [
            ("Fecha", 12),
            ("Día", 6),
            ("Duración\n(min)", 10),
            ("Esfuerzo", 10),
            ("Nivel", 10),
            ("Descripción", 40),
        ],
    )
    _apply_number_formats(
        ws,
        {
            "Fecha": "dd/mm/yyyy",
            "Duración\n(min)": "0.0",
            "Esfuerzo": "0.00",
        },
    )


def _format_summary_sheet(ws: Any) -> None:
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_widths(ws, [("Métrica", 30), ("Valor", 12)])
    _apply_number_formats(ws, {"Valor": "0.0"})
