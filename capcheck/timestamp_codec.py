"""Converts caption timestamps (HH:MM:SS,mmm / HH:MM:SS.mmm) to and from durations."""

from datetime import timedelta
from typing import TYPE_CHECKING

from .exceptions import InvalidDigitsError, InvalidSecondsFormatError, InvalidTimeFormatError

if TYPE_CHECKING:
    from .caption_parser import CaptionFormat

MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000

def _to_int(component: str) -> int:
    if not (component.isascii() and component.isdigit()):
        raise InvalidDigitsError(f'invalid syntax: "{component}" is not a number')
    return int(component)

def parse_timestamp(time_str: str, fmt: "CaptionFormat") -> timedelta:
    """
    Parses a single caption timestamp into a duration since the start of the media.

    Args:
        time_str: Timestamp such as "01:23:45,678" (SRT) or "01:23:45.678" (WebVTT).
        fmt: The caption format; its separator splits seconds from milliseconds.

    Returns:
        HH*3600000 + MM*60000 + SS*1000 + mmm milliseconds as a timedelta.

    Raises:
        InvalidTimeFormatError: If there are not exactly three ':'-separated parts.
        InvalidSecondsFormatError: If the seconds part does not split in two on the separator.
        InvalidDigitsError: If any component is not numeric.
    """
    parts = time_str.split(":")
    if len(parts) != 3:
        raise InvalidTimeFormatError(f"invalid time format: {time_str}")

    hours = _to_int(parts[0])
    minutes = _to_int(parts[1])

    sec_parts = parts[2].split(fmt.separator)
    if len(sec_parts) != 2:
        raise InvalidSecondsFormatError(f"invalid seconds format: {parts[2]}")

    seconds = _to_int(sec_parts[0])
    milliseconds = _to_int(sec_parts[1])

    total_ms = hours * MS_PER_HOUR + minutes * MS_PER_MINUTE + seconds * MS_PER_SECOND + milliseconds
    return timedelta(milliseconds=total_ms)

def format_timestamp(duration: timedelta, fmt: "CaptionFormat") -> str:
    """
    Formats a duration as a caption timestamp, HH:MM:SS followed by the format's separator and ms.

    Args:
        duration: Offset from the start of the media.
        fmt: The caption format.

    Returns:
        Formatted time string.
    """
    milliseconds = duration // timedelta(milliseconds=1)
    if milliseconds < 0:
        milliseconds = 0 # Ensure non-negative time
    hrs = milliseconds // MS_PER_HOUR
    milliseconds %= MS_PER_HOUR
    mins = milliseconds // MS_PER_MINUTE
    milliseconds %= MS_PER_MINUTE
    secs = milliseconds // MS_PER_SECOND
    milliseconds %= MS_PER_SECOND
    return f"{hrs:02d}:{mins:02d}:{secs:02d}{fmt.separator}{milliseconds:03d}"
