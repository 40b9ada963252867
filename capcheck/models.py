"""Data models for CapCheck."""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

@dataclass(frozen=True)
class CaptionEntry:
    """One timed text block from a caption file. start <= end is not guaranteed."""
    start: timedelta
    end: timedelta
    text: str

@dataclass(frozen=True)
class TimeRange:
    """The window that captions are expected to cover."""
    start: timedelta
    end: timedelta

    @property
    def length(self) -> timedelta:
        return self.end - self.start

@dataclass
class ValidationConfig:
    """Validated settings for a validation run."""
    file_path: Optional[str]
    window: TimeRange
    endpoint: str
    coverage: float = 0.8
    expected_language: str = "en-US"
    coverage_mode: str = "sum"
    request_timeout: float = 30.0
    log_dir: Optional[str] = None
    log_file: str = "capcheck.log"

@dataclass
class ValidationFailure:
    """A single failed check, as handed to the error sink."""
    kind: str
    description: str

@dataclass
class ValidationReport:
    """Outcome of validating one caption file."""
    file_path: str
    entry_count: int = 0
    coverage_ratio: Optional[float] = None
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures
