"""Utility functions for CapCheck."""

import math
import os
import re
import logging
from datetime import timedelta
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

# Go-style duration units ("300ms", "1m30s", "1.5h"), in microseconds.
_UNIT_MICROSECONDS = {
    'ns': 0.001,
    'us': 1,
    'µs': 1,
    'μs': 1,
    'ms': 1000,
    's': 1000 * 1000,
    'm': 60 * 1000 * 1000,
    'h': 3600 * 1000 * 1000,
}
_DURATION_PART = re.compile(r'(\d*(?:\.\d*)?)(ns|us|µs|μs|ms|s|m|h)')
# Largest duration a signed 64-bit nanosecond count can hold (about 292 years)
_MAX_MICROSECONDS = (2**63 - 1) // 1000

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def parse_duration(value: str) -> timedelta:
    """
    Parses a Go-style duration string such as "30s", "1m30s" or "1.5h".

    A sequence of decimal numbers, each with an optional fraction and a unit
    suffix, with an optional leading sign. "0" is accepted without a unit.
    Nanosecond parts are rounded to the nearest microsecond. Durations past
    roughly 292 years are rejected.

    Args:
        value: The duration string.

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip() if value else ""
    if not text:
        raise ValueError("invalid duration: empty string")

    negative = False
    if text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    total_us = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match or match.group(1) in ("", "."):
            raise ValueError(f"invalid duration: {value!r}")
        total_us += float(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        pos = match.end()

    if not math.isfinite(total_us) or total_us > _MAX_MICROSECONDS:
        raise ValueError(f"invalid duration: {value!r}")
    duration = timedelta(microseconds=round(total_us))
    return -duration if negative else duration

def _trim_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}." + f"{frac:0{digits}d}".rstrip('0')

def format_duration(duration: timedelta) -> str:
    """
    Formats a duration the way Go prints time.Duration ("0s", "1m30s", "1h0m0s", "250ms").
    """
    total_us = duration // timedelta(microseconds=1)
    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)

    if total_us == 0:
        return "0s"
    if total_us < 1000:
        return f"{sign}{total_us}µs"
    if total_us < 1000 * 1000:
        return f"{sign}{_trim_fraction(total_us, 1000)}ms"

    hours, rest = divmod(total_us, 3600 * 1000 * 1000)
    minutes, rest = divmod(rest, 60 * 1000 * 1000)
    seconds = _trim_fraction(rest, 1000 * 1000) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"
