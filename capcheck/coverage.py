"""Measures how much of a time window is covered by caption entries."""

import logging
from datetime import timedelta
from typing import List, Sequence, Tuple

from .models import CaptionEntry, TimeRange

logger = logging.getLogger(__name__)

def _clip(entry: CaptionEntry, window: TimeRange) -> Tuple[timedelta, timedelta]:
    return max(entry.start, window.start), min(entry.end, window.end)

def covered_duration(entries: Sequence[CaptionEntry], window: TimeRange) -> timedelta:
    """
    Sums each entry's overlap with the window.

    Entries are measured independently, so where two entries overlap each
    other inside the window the shared part is counted twice. Entries with
    start >= end contribute nothing.
    """
    covered = timedelta(0)
    for entry in entries:
        overlap_start, overlap_end = _clip(entry, window)
        if overlap_start < overlap_end:
            covered += overlap_end - overlap_start
    return covered

def union_covered_duration(entries: Sequence[CaptionEntry], window: TimeRange) -> timedelta:
    """Length of the union of all entry intervals inside the window; overlaps count once."""
    clipped: List[Tuple[timedelta, timedelta]] = []
    for entry in entries:
        overlap_start, overlap_end = _clip(entry, window)
        if overlap_start < overlap_end:
            clipped.append((overlap_start, overlap_end))
    clipped.sort()

    covered = timedelta(0)
    run_start = run_end = None
    for start, end in clipped:
        if run_end is None or start > run_end:
            if run_end is not None:
                covered += run_end - run_start
            run_start, run_end = start, end
        elif end > run_end:
            run_end = end
    if run_end is not None:
        covered += run_end - run_start
    return covered

def coverage_ratio(entries: Sequence[CaptionEntry], window: TimeRange, merge_overlaps: bool = False) -> float:
    """
    Fraction of the window covered by captions. 0.0 for an empty or inverted window.

    Args:
        entries: Caption entries in any order.
        window: The range to measure.
        merge_overlaps: Count overlapping entries once instead of summing them.

    Returns:
        covered / window length. Can exceed 1.0 when overlaps are summed.
    """
    window_length = window.length
    if window_length <= timedelta(0):
        return 0.0
    if merge_overlaps:
        covered = union_covered_duration(entries, window)
    else:
        covered = covered_duration(entries, window)
    return covered / window_length

def evaluate_coverage(
    entries: Sequence[CaptionEntry],
    window: TimeRange,
    required_fraction: float,
    merge_overlaps: bool = False
) -> bool:
    """
    Checks that captions cover at least the required fraction of the window.

    Args:
        entries: Caption entries.
        window: The range that has to be covered.
        required_fraction: Threshold in [0.0, 1.0]; reaching it exactly passes.
        merge_overlaps: Use the interval union instead of the per-entry sum.

    Returns:
        False for an empty or inverted window, otherwise ratio >= required_fraction.
    """
    if window.length <= timedelta(0):
        logger.warning(f"Coverage window is empty or inverted ({window.start} to {window.end}).")
        return False
    ratio = coverage_ratio(entries, window, merge_overlaps=merge_overlaps)
    logger.debug(f"Coverage {ratio:.3f} against required {required_fraction:.3f}")
    return ratio >= required_fraction
