"""Orchestrates the caption validation pipeline."""

import logging
import time

from .caption_parser import parse_caption_file
from .coverage import coverage_ratio, evaluate_coverage
from .exceptions import CaptionParseError
from .language_detector import LanguageDetector, validate_language
from .models import ValidationConfig, ValidationFailure, ValidationReport
from .text_aggregator import aggregate_text
from .utils import format_duration

logger = logging.getLogger(__name__)

FILE_PARSE_ERROR = "file_parse_error"
INSUFFICIENT_COVERAGE = "insufficient_coverage"
INVALID_LANGUAGE = "invalid_language"

COVERAGE_MODES = ("sum", "union")

class CaptionValidator:
    """
    Runs the coverage and language checks against one caption file at a time.

    Holds no per-file state, so one instance can validate any number of files.
    """

    def __init__(self, config: ValidationConfig, detector: LanguageDetector):
        """
        Initializes the CaptionValidator.

        Args:
            config: Validated run settings (window, threshold, expected language).
            detector: Language detection service used for the language check.
        """
        self.config = config
        self.detector = detector
        self.merge_overlaps = config.coverage_mode == "union"

    def validate(self, file_path: str) -> ValidationReport:
        """
        Parses the caption file and runs both checks.

        A parse failure ends the run with a single file_parse_error. Otherwise
        coverage and language are both evaluated, each adding a failure when it
        does not pass.

        Args:
            file_path: Path to a .srt or .vtt file.

        Returns:
            A ValidationReport; an empty failures list means the file passed.
        """
        start_time = time.time()
        report = ValidationReport(file_path=file_path)
        logger.info(f"--- Validating captions: {file_path} ---")

        try:
            entries = parse_caption_file(file_path)
        except CaptionParseError as e:
            logger.error(f"Caption parsing failed for {file_path}: {e}")
            report.failures.append(ValidationFailure(FILE_PARSE_ERROR, f"Failed to parse caption file: {e}"))
            return report

        report.entry_count = len(entries)
        window = self.config.window

        report.coverage_ratio = coverage_ratio(entries, window, merge_overlaps=self.merge_overlaps)
        logger.info(f"Coverage of {format_duration(window.start)}-{format_duration(window.end)}: {report.coverage_ratio:.1%}")
        if not evaluate_coverage(entries, window, self.config.coverage, merge_overlaps=self.merge_overlaps):
            report.failures.append(ValidationFailure(
                INSUFFICIENT_COVERAGE,
                f"Captions do not cover required {self.config.coverage * 100:.1f}% of time range "
                f"{format_duration(window.start)} to {format_duration(window.end)}"
            ))

        text = aggregate_text(entries)
        if not validate_language(text, self.detector, self.config.expected_language):
            report.failures.append(ValidationFailure(
                INVALID_LANGUAGE,
                f"Caption language is not {self.config.expected_language} or language detection failed"
            ))

        logger.info(f"--- Validation of {file_path} finished in {time.time() - start_time:.2f}s with {len(report.failures)} failure(s) ---")
        return report
