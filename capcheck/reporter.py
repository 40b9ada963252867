"""Writes validation failures as JSON lines."""

import json
import sys
from typing import Optional, TextIO

from .models import ValidationFailure

class JsonLineReporter:
    """Renders each (kind, description) pair as one compact JSON object per line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def report(self, kind: str, description: str, **extra) -> None:
        record = {"type": kind, "description": description}
        record.update(extra)
        self.stream.write(json.dumps(record, ensure_ascii=False, separators=(',', ':')) + "\n")
        self.stream.flush()

    def report_failure(self, failure: ValidationFailure, **extra) -> None:
        self.report(failure.kind, failure.description, **extra)
