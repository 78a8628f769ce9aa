"""Parseo y formato de duraciones con sufijo de unidad (p. ej. "1h30m")."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

# Nanoseconds per unit.
_UNITS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT_RX = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)", re.ASCII)
_FULL_RX = re.compile(r"(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+", re.ASCII)

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def parse_duration(text: str) -> timedelta:
    """Parse a unit-suffixed duration such as ``1h30m``, ``45m0s`` or ``1.5h``.

    Args:
        text: Duration string. ``"0"`` alone is accepted as zero.

    Returns:
        Parsed duration, truncated to microsecond resolution.

    Raises:
        ValueError: If the text is empty, signed, padded with whitespace,
            not made of number+unit components or too large.
    """
    if text == "0":
        return timedelta(0)
    if not _FULL_RX.fullmatch(text):
        raise ValueError(f"invalid duration: {text!r}")

    total_ns = Decimal(0)
    for number, unit in _COMPONENT_RX.findall(text):
        try:
            total_ns += Decimal(number) * _UNITS[unit]
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration: {text!r}") from exc
    try:
        return timedelta(microseconds=int(total_ns // 1000))
    except OverflowError:
        raise ValueError(f"invalid duration: {text!r}") from None


def format_duration(value: timedelta) -> str:
    """Format a duration in the canonical form read back by :func:`parse_duration`.

    Examples: ``0s``, ``750µs``, ``1.5ms``, ``30s``, ``45m0s``, ``1h30m0s``.
    """
    us = (value.days * 86400 + value.seconds) * _US_PER_SECOND + value.microseconds
    if us < 0:
        raise ValueError(f"negative duration: {value}")
    if us == 0:
        return "0s"
    if us < 1000:
        return f"{us}µs"
    if us < _US_PER_SECOND:
        return f"{_fraction(us, 1000)}ms"

    hours, rest = divmod(us, _US_PER_HOUR)
    minutes, rest = divmod(rest, _US_PER_MINUTE)
    out = ""
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + f"{_fraction(rest, _US_PER_SECOND)}s"


def _fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    digits = str(frac).rjust(width, "0").rstrip("0")
    return f"{whole}.{digits}"
