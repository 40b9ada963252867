"""Collects caption text for language detection."""

from typing import Sequence

from .models import CaptionEntry

def aggregate_text(entries: Sequence[CaptionEntry]) -> str:
    """
    Joins the text of all non-blank entries with single spaces, in entry order.

    Blank-ness is judged on the trimmed text but the original text is what gets
    joined. Returns "" when there is nothing to join.
    """
    return " ".join(entry.text for entry in entries if entry.text.strip())
