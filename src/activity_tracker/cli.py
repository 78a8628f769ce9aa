"""CLI para registrar actividad diaria y ver la ventana de dos semanas."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import TypeVar

from dateutil import tz

from activity_tracker.codec import decode, encode_and_append, parse_date, parse_effort
from activity_tracker.durations import parse_duration
from activity_tracker.excel_writer import ExcelLayout, write_window_xlsx
from activity_tracker.model import Day, Entry, UserProfile
from activity_tracker.reconcile import reconcile
from activity_tracker.report import format_summary, format_window
from activity_tracker.scoring import SUMMARY_DAYS, ScoreConfig, summarize
from activity_tracker.storage import SQLiteProfileStore
from activity_tracker.stores.base import LogPaths, LogStore
from activity_tracker.stores.local_file import FileLogStore

logger = logging.getLogger(__name__)

_LOCAL_TZ = tz.tzlocal()
DB_FILE_NAME = "activity_tracker.sqlite3"

T = TypeVar("T")


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _duration_arg(value: str) -> timedelta:
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _effort_arg(value: str) -> float:
    try:
        return parse_effort(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Registro de actividad diaria con puntaje semanal."
    )
    parser.add_argument(
        "--data-dir",
        default=str(Path.home() / ".activity_tracker"),
        help="Directorio de datos (default: ~/.activity_tracker).",
    )
    parser.add_argument("--user", required=True, help="Nombre de usuario.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Logging en nivel DEBUG."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-user", help="Crear o actualizar el perfil.")
    init.add_argument("--resting-heart-rate", type=float, default=None)
    init.add_argument("--date-of-birth", type=_date_arg, default=None)

    add = sub.add_parser("add", help="Agregar una entrada.")
    add.add_argument(
        "--date", type=_date_arg, default=None, help="YYYY-MM-DD (default: hoy)."
    )
    add.add_argument(
        "--duration", type=_duration_arg, required=True, help="Ej: 1h30m, 45m."
    )
    add.add_argument(
        "--effort", type=_effort_arg, required=True, help="Esfuerzo 0-1."
    )
    add.add_argument("--description", default="")

    show = sub.add_parser("show", help="Mostrar las últimas dos semanas.")
    show.add_argument("--today", type=_date_arg, default=None)

    export = sub.add_parser("export", help="Exportar la ventana a Excel.")
    export.add_argument("--today", type=_date_arg, default=None)
    export.add_argument("--out", default=None, help="Ruta del .xlsx de salida.")

    config = sub.add_parser("config", help="Ver o cambiar la configuración.")
    config.add_argument("--moderate-floor", type=float, default=None)
    config.add_argument("--high-floor", type=float, default=None)
    config.add_argument("--weekly-hours", type=float, default=None)

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _today() -> date:
    return datetime.now(tz=_LOCAL_TZ).date()


def _log_store(ns: argparse.Namespace) -> FileLogStore:
    root = Path(ns.data_dir).expanduser()
    return FileLogStore(LogPaths(root=root, username=ns.user))


def _profile_store(ns: argparse.Namespace) -> SQLiteProfileStore:
    return SQLiteProfileStore(Path(ns.data_dir).expanduser() / DB_FILE_NAME)


def _prompt(label: str, parse: Callable[[str], T]) -> T:
    while True:
        raw = input(f"{label}: ").strip()
        try:
            return parse(raw)
        except ValueError:
            print(f"Valor inválido: {raw!r}")


def load_window(store: LogStore, today: date) -> list[Day]:
    """Decode the store and reconcile it into the window ending today.

    Days logged after ``today`` move the window's end forward to the latest
    of them.
    """
    days = decode(store.read_all()).days
    reference = max([today, *days])
    return reconcile(days, reference)


def cmd_init_user(ns: argparse.Namespace) -> int:
    heart_rate = ns.resting_heart_rate
    if heart_rate is None:
        heart_rate = _prompt("resting heart rate", float)
    dob = ns.date_of_birth
    if dob is None:
        dob = _prompt("date of birth (YYYY-MM-DD)", parse_date)

    profile = UserProfile(
        username=ns.user, resting_heart_rate=heart_rate, date_of_birth=dob
    )
    _profile_store(ns).save_profile(profile)

    # Creates the log if missing; existing data is left as is.
    store = _log_store(ns)
    store.append(b"")
    print(f"OK: perfil de {ns.user} guardado ({store.path})")
    return 0


def cmd_add(ns: argparse.Namespace) -> int:
    day = ns.date or _today()
    entry = Entry(duration=ns.duration, effort=ns.effort, description=ns.description)
    encode_and_append([(day, entry)], _log_store(ns))
    print(f"OK: {day.isoformat()} {ns.description}".rstrip())
    return 0


def _load_for_report(
    ns: argparse.Namespace,
) -> tuple[list[Day], UserProfile, ScoreConfig] | None:
    profiles = _profile_store(ns)
    profile = profiles.load_profile(ns.user)
    if profile is None:
        print(f"No existe el perfil de {ns.user}; ejecutar init-user primero.")
        return None
    window = load_window(_log_store(ns), ns.today or _today())
    return window, profile, profiles.load_score_config()


def cmd_show(ns: argparse.Namespace) -> int:
    loaded = _load_for_report(ns)
    if loaded is None:
        return 1
    window, profile, config = loaded
    summary = summarize(window[:SUMMARY_DAYS], profile, config=config)
    print(format_summary(summary))
    print()
    print(format_window(window, config))
    return 0


def cmd_export(ns: argparse.Namespace) -> int:
    loaded = _load_for_report(ns)
    if loaded is None:
        return 1
    window, profile, config = loaded
    summary = summarize(window[:SUMMARY_DAYS], profile, config=config)

    if ns.out:
        out_path = Path(ns.out).expanduser()
    else:
        ts = datetime.now(tz=_LOCAL_TZ).strftime("%Y-%m-%d_%H-%M-%S")
        out_path = (
            Path(ns.data_dir).expanduser() / ns.user / "salidas" / f"actividad_{ts}.xlsx"
        )
    write_window_xlsx(window, summary, out_path, ExcelLayout(), config)
    print(f"OK: Output: {out_path}")
    return 0


def cmd_config(ns: argparse.Namespace) -> int:
    profiles = _profile_store(ns)
    config = profiles.load_score_config()
    changes = {
        key: value
        for key, value in (
            ("moderate_floor", ns.moderate_floor),
            ("high_floor", ns.high_floor),
            ("minimum_moderate_hours_per_week", ns.weekly_hours),
        )
        if value is not None
    }
    if changes:
        try:
            config = replace(config, **changes)
        except ValueError as exc:
            print(f"Configuración inválida: {exc}")
            return 1
        profiles.save_score_config(config)
        logger.info("Updated score config: %s", changes)
    print(f"moderate_floor: {config.moderate_floor:.2f}")
    print(f"high_floor: {config.high_floor:.2f}")
    print(f"weekly_hours: {config.minimum_moderate_hours_per_week:.2f}")
    return 0


_COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "init-user": cmd_init_user,
    "add": cmd_add,
    "show": cmd_show,
    "export": cmd_export,
    "config": cmd_config,
}


def main(argv: list[str] | None = None) -> int:
    """Run the activity tracker CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    setup_logging(ns.verbose)
    return _COMMANDS[ns.command](ns)
