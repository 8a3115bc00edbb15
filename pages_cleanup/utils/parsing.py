"""Helpers for parsing loosely-typed inputs."""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any

TRUE_VALUES = {"true", "1", "yes", "y"}
FALSE_VALUES = {"false", "0", "no", "n"}
# Plain decimal numbers with an optional exponent; no underscores or radix prefixes
NUMERIC_TEXT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def parse_bool(value: Any, default: bool) -> bool:
    """Parse a boolean-ish input, falling back to ``default`` when unrecognised."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return default


def parse_int_strict(value: Any, default: int | None) -> int | None:
    """Parse an integer input, rejecting anything that is not a whole number.

    ``None`` and blank strings yield ``default``. Strings such as ``"1e3"`` or
    ``"5.0"`` are accepted because they denote integers.

    Raises:
        ValueError: If the value is not an integer.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"Expected integer, got '{value}'")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return default
        if not NUMERIC_TEXT.fullmatch(text):
            raise ValueError(f"Expected integer, got '{value}'")
        if text.lstrip("+-").isdigit():
            return int(text)
        number = float(text)

    if not math.isfinite(number) or not number.is_integer():
        raise ValueError(f"Expected integer, got '{value}'")
    return int(number)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def days_ago_utc(days: float, now: datetime | None = None) -> datetime:
    """Return the instant ``days`` days before ``now`` (default: current UTC time)."""
    reference = now or utc_now()
    try:
        return reference - timedelta(days=days)
    except OverflowError:
        # Past the datetime range: clamp so nothing (or everything) is older
        if days > 0:
            return datetime.min.replace(tzinfo=timezone.utc)
        return datetime.max.replace(tzinfo=timezone.utc)


def error_message(error: Any) -> str:
    """Best-effort human readable message for an exception or arbitrary value."""
    return str(error)
