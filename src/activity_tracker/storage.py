"""Persistencia SQLite para perfiles de usuario y configuración del puntaje."""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import asdict, fields
from datetime import date
from pathlib import Path
from typing import Any

from activity_tracker.model import UserProfile
from activity_tracker.scoring import ScoreConfig

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS profiles (
    username TEXT PRIMARY KEY,
    resting_heart_rate REAL NOT NULL,
    date_of_birth TEXT NOT NULL
);
"""

_SCORE_CONFIG_KEY = "score_config"


class SQLiteProfileStore:
    """Repositorio SQLite de perfiles y configuración."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def save_profile(self, profile: UserProfile) -> None:
        """Inserta o reemplaza el perfil del usuario."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO profiles(username, resting_heart_rate, date_of_birth)
                VALUES (?, ?, ?)
                ON CONFLICT(username) DO UPDATE SET
                    resting_heart_rate=excluded.resting_heart_rate,
                    date_of_birth=excluded.date_of_birth
                """,
                (
                    profile.username,
                    profile.resting_heart_rate,
                    profile.date_of_birth.isoformat(),
                ),
            )
            conn.commit()
        logger.info("Saved profile for %s", profile.username)

    def load_profile(self, username: str) -> UserProfile | None:
        """Devuelve el perfil guardado o None si no existe."""
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT username, resting_heart_rate, date_of_birth
                FROM profiles WHERE username = ?
                """,
                (username,),
            ).fetchone()
        if row is None:
            return None
        return UserProfile(
            username=row["username"],
            resting_heart_rate=float(row["resting_heart_rate"]),
            date_of_birth=date.fromisoformat(row["date_of_birth"]),
        )

    def load_score_config(self) -> ScoreConfig:
        """Devuelve configuración guardada mezclada con los defaults."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM app_config WHERE key = ?", (_SCORE_CONFIG_KEY,)
            ).fetchone()
        if row is None:
            return ScoreConfig()
        return _parse_score_config(row["value"])

    def save_score_config(self, config: ScoreConfig) -> None:
        """Guarda la configuración en tabla key/value."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                (_SCORE_CONFIG_KEY, json.dumps(asdict(config))),
            )
            conn.commit()


def _parse_score_config(raw: str) -> ScoreConfig:
    try:
        parsed: Any = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored score config is not valid JSON; using defaults")
        return ScoreConfig()
    if not isinstance(parsed, dict):
        return ScoreConfig()

    known = {f.name for f in fields(ScoreConfig)}
    values: dict[str, float] = {}
    for key, value in parsed.items():
        if key not in known:
            continue
        try:
            values[key] = float(value)
        except (TypeError, ValueError):
            continue
    try:
        return ScoreConfig(**values)
    except ValueError:
        logger.warning("Stored score config is inconsistent; using defaults")
        return ScoreConfig()
