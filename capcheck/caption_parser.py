"""Parses SubRip (.srt) and WebVTT (.vtt) caption files into timed entries."""

import logging
import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from .models import CaptionEntry
from .exceptions import CaptionParseError, TimestampError, UnsupportedFormatError
from .timestamp_codec import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

# Trimmed from both ends of every line; \x1c-\x1f and non-ASCII spaces are content
LINE_WHITESPACE = " \t\n\v\f\r"

def _timing_pattern(separator: str) -> re.Pattern:
    timestamp = r'\d{2}:\d{2}:\d{2}' + re.escape(separator) + r'\d{3}'
    return re.compile(rf'({timestamp})\s+-->\s+({timestamp})', re.ASCII)

@dataclass(frozen=True)
class CaptionFormat:
    """Describes how one caption format lays out its blocks and timestamps."""
    name: str
    extension: str
    separator: str
    has_sequence_line: bool
    skip_header: bool
    header_markers: Tuple[str, ...]
    timing_pattern: re.Pattern

SRT = CaptionFormat(
    name="srt",
    extension=".srt",
    separator=",",
    has_sequence_line=True,
    skip_header=False,
    header_markers=(),
    timing_pattern=_timing_pattern(","),
)

VTT = CaptionFormat(
    name="vtt",
    extension=".vtt",
    separator=".",
    has_sequence_line=False,
    skip_header=True,
    header_markers=("WEBVTT", "NOTE"),
    timing_pattern=_timing_pattern("."),
)

FORMATS_BY_EXTENSION: Dict[str, CaptionFormat] = {fmt.extension: fmt for fmt in (SRT, VTT)}


class ScanState(NamedTuple):
    """
    Scanner state between two lines.

    start/end hold the most recently parsed timing line and survive block
    boundaries, so a block without its own timing line reuses the previous one.
    """
    start: timedelta = timedelta(0)
    end: timedelta = timedelta(0)
    text_lines: Tuple[str, ...] = ()
    expecting_sequence: bool = False
    in_header: bool = False


def initial_state(fmt: CaptionFormat) -> ScanState:
    """Returns the state the scanner is in before the first line of a file."""
    return ScanState(expecting_sequence=fmt.has_sequence_line, in_header=fmt.skip_header)


def finalize_block(state: ScanState) -> Optional[CaptionEntry]:
    """Builds the entry for the accumulated block, or None if the block has no text."""
    if not state.text_lines:
        return None
    return CaptionEntry(start=state.start, end=state.end, text=" ".join(state.text_lines))


def advance(state: ScanState, raw_line: str, fmt: CaptionFormat) -> Tuple[ScanState, Optional[CaptionEntry]]:
    """
    Consumes one line of caption text.

    Args:
        state: The state after the previous line.
        raw_line: The next line of the file, untrimmed.
        fmt: The caption format being scanned.

    Returns:
        The new state, and the entry finalized by this line (if any).

    Raises:
        CaptionParseError: If a timing line matches the timing pattern but
                           one of its timestamps cannot be converted.
    """
    line = raw_line.strip(LINE_WHITESPACE)

    if state.in_header:
        if not line or line.startswith(fmt.header_markers):
            return state, None
        state = state._replace(in_header=False)

    if not line:
        emitted = finalize_block(state)
        return state._replace(text_lines=(), expecting_sequence=fmt.has_sequence_line), emitted

    if state.expecting_sequence:
        # Ordinal index line, never validated
        return state._replace(expecting_sequence=False), None

    match = fmt.timing_pattern.search(line)
    if match is None:
        return state._replace(text_lines=state.text_lines + (line,)), None

    try:
        start = parse_timestamp(match.group(1), fmt)
    except TimestampError as e:
        raise CaptionParseError(f"error parsing start time: {e}") from e
    try:
        end = parse_timestamp(match.group(2), fmt)
    except TimestampError as e:
        raise CaptionParseError(f"error parsing end time: {e}") from e
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Timing line: {format_timestamp(start, fmt)} --> {format_timestamp(end, fmt)}")
    return state._replace(start=start, end=end), None


def scan_lines(lines: Iterable[str], fmt: CaptionFormat) -> List[CaptionEntry]:
    """
    Groups caption lines into entries.

    Args:
        lines: The file's lines, in order.
        fmt: The caption format (SRT or VTT).

    Returns:
        The entries in file order.

    Raises:
        CaptionParseError: On a timing line whose timestamps cannot be converted.
                           No partial result is returned.
    """
    state = initial_state(fmt)
    entries: List[CaptionEntry] = []
    for line in lines:
        state, emitted = advance(state, line, fmt)
        if emitted is not None:
            entries.append(emitted)

    # File may not end with a blank line
    last = finalize_block(state)
    if last is not None:
        entries.append(last)
    return entries


def parse_captions(content: str, fmt: CaptionFormat) -> List[CaptionEntry]:
    """Parses the full text of a caption file. LF and CRLF line endings are both accepted."""
    entries = scan_lines(content.split("\n"), fmt)
    logger.debug(f"Scanned {len(entries)} {fmt.name.upper()} caption entries.")
    return entries


def format_for_path(file_path: str) -> CaptionFormat:
    """
    Selects the caption format from a file's extension (case-insensitive).

    Raises:
        UnsupportedFormatError: If the extension is not .srt or .vtt.
    """
    ext = os.path.splitext(file_path)[1].lower()
    fmt = FORMATS_BY_EXTENSION.get(ext)
    if fmt is None:
        raise UnsupportedFormatError(f"unsupported file type: {ext or file_path}")
    return fmt


def is_valid_file_type(file_path: str) -> bool:
    """Returns True for paths ending in .srt or .vtt (any case)."""
    ext = os.path.splitext(file_path)[1].lower()
    return ext in FORMATS_BY_EXTENSION


def parse_caption_file(file_path: str) -> List[CaptionEntry]:
    """
    Reads a caption file to completion and parses it.

    Args:
        file_path: Path to a .srt or .vtt file.

    Returns:
        The caption entries in file order.

    Raises:
        UnsupportedFormatError: If the extension is not .srt or .vtt.
        CaptionParseError: If the file cannot be read or holds a bad timestamp.
    """
    fmt = format_for_path(file_path)
    logger.info(f"Parsing {fmt.name.upper()} caption file: {file_path}")
    try:
        # utf-8-sig drops a leading byte-order mark
        with open(file_path, 'r', encoding='utf-8-sig', errors='replace', newline='') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Could not read caption file {file_path}: {e}", exc_info=True)
        raise CaptionParseError(f"could not read {file_path}: {e}") from e

    entries = parse_captions(content, fmt)
    logger.info(f"Parsed {len(entries)} caption entries from {file_path}")
    return entries
