"""Command-Line Interface handler for CapCheck."""

import argparse
import logging
import sys
from typing import List, Optional

from .caption_parser import is_valid_file_type
from .config_loader import ConfigLoader
from .exceptions import CapCheckError, ConfigurationError
from .language_detector import DEFAULT_EXPECTED_LANGUAGE, HttpLanguageDetector
from .log_setup import setup_logging
from .models import TimeRange, ValidationConfig
from .reporter import JsonLineReporter
from .utils import parse_duration
from .validator import COVERAGE_MODES, CaptionValidator

logger = logging.getLogger(__name__) # Get logger for this module

DEFAULT_COVERAGE = 0.8
DEFAULT_TIMEOUT = 30.0

def add_validation_arguments(parser: argparse.ArgumentParser) -> None:
    """Adds the flags shared by the single-file and batch commands."""
    parser.add_argument(
        "--start", "--t_start",
        dest="start",
        default="0s",
        help="Start of the time range to check, as a duration (e.g. 30s, 1m30s)."
    )
    parser.add_argument(
        "--end", "--t_end",
        dest="end",
        default=None,
        help="End of the time range to check, as a duration. Required."
    )
    parser.add_argument(
        "--coverage",
        type=float,
        default=None, # Default taken from config file, else 0.8
        help="Required coverage fraction of the time range (0.0-1.0)."
    )
    parser.add_argument(
        "--endpoint",
        default=None,
        help="Language detection endpoint URL. Required here or in the config file."
    )
    parser.add_argument(
        "--expected-language",
        default=None,
        help=f"Language tag the captions must be detected as (config default: {DEFAULT_EXPECTED_LANGUAGE})."
    )
    parser.add_argument(
        "--coverage-mode",
        default=None,
        choices=COVERAGE_MODES,
        help="'sum' adds up every caption's overlap; 'union' counts overlapping captions once."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Language detection request timeout in seconds."
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Optional YAML configuration file with defaults for the flags above."
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Also write logs to a rotating file in this directory."
    )

def _pick(flag_value, file_config: dict, key: str, default):
    if flag_value is not None:
        return flag_value
    value = file_config.get(key)
    return default if value is None else value

def build_config(args: argparse.Namespace, file_config: dict, require_file: bool = True) -> ValidationConfig:
    """
    Merges command line flags over the YAML settings and validates the result.

    Args:
        args: Parsed command line arguments.
        file_config: Settings from the YAML file (may be empty).
        require_file: Whether --file must be present.

    Returns:
        A ValidationConfig ready to hand to the validator.

    Raises:
        ConfigurationError: If a required value is missing or out of range.
    """
    file_path = getattr(args, "file", None)
    if require_file and not file_path:
        raise ConfigurationError("file path is required")
    if not args.end:
        raise ConfigurationError("end time is required")

    endpoint = _pick(args.endpoint, file_config, "endpoint", None)
    if not endpoint:
        raise ConfigurationError("endpoint URL is required")

    try:
        start = parse_duration(args.start)
    except ValueError as e:
        raise ConfigurationError(f"invalid start time format: {e}") from e
    try:
        end = parse_duration(args.end)
    except ValueError as e:
        raise ConfigurationError(f"invalid end time format: {e}") from e
    if start >= end:
        raise ConfigurationError("start time must be less than end time")

    try:
        coverage = float(_pick(args.coverage, file_config, "coverage", DEFAULT_COVERAGE))
        timeout = float(_pick(args.timeout, file_config, "request_timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid numeric setting: {e}") from e
    if not 0.0 <= coverage <= 1.0:
        raise ConfigurationError("coverage must be between 0.0 and 1.0")
    if not timeout > 0:
        raise ConfigurationError("timeout must be positive")

    coverage_mode = str(_pick(args.coverage_mode, file_config, "coverage_mode", "sum")).lower()
    if coverage_mode not in COVERAGE_MODES:
        raise ConfigurationError(f"coverage mode must be one of {', '.join(COVERAGE_MODES)}, got '{coverage_mode}'")

    return ValidationConfig(
        file_path=file_path,
        window=TimeRange(start=start, end=end),
        endpoint=str(endpoint),
        coverage=coverage,
        expected_language=str(_pick(args.expected_language, file_config, "expected_language", DEFAULT_EXPECTED_LANGUAGE)),
        coverage_mode=coverage_mode,
        request_timeout=timeout,
        log_dir=_pick(args.log_dir, file_config, "log_dir", None),
        log_file=str(file_config.get("log_file") or "capcheck.log"),
    )

def load_file_config(config_path: Optional[str]) -> dict:
    """Loads the YAML config when a path is given, else returns an empty dict."""
    if not config_path:
        return {}
    try:
        return ConfigLoader().load_config(config_path)
    except FileNotFoundError as e:
        raise ConfigurationError(str(e)) from e

class CLIHandler:
    """Parses arguments and validates a single caption file."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="CapCheck: check that a .srt/.vtt caption file covers a time range and is in the expected language.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-f", "--file",
            default=None,
            help="Path to the caption file (.srt or .vtt). Required."
        )
        add_validation_arguments(parser)
        parser.add_argument(
            "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parses arguments, validates the file and prints one JSON line per failure.

        Returns:
            The process exit code: 0 once validation ran (whatever its outcome),
            1 for bad flags/config or an unsupported file, 2 for unexpected errors.
        """
        args = self.parser.parse_args(argv)

        log_level = getattr(logging, args.log_level.upper(), logging.WARNING)
        setup_logging(log_level=log_level)

        try:
            config = build_config(args, load_file_config(args.config))
        except ConfigurationError as e:
            logger.debug("Configuration rejected", exc_info=True)
            sys.stderr.write(f"Error parsing flags: {e}\n")
            return 1

        if config.log_dir:
            setup_logging(log_level=log_level, log_dir=config.log_dir, log_file=config.log_file)

        if not is_valid_file_type(config.file_path):
            logger.error(f"Unsupported caption file type (expected .srt or .vtt): {config.file_path}")
            return 1

        reporter = JsonLineReporter()
        try:
            detector = HttpLanguageDetector(config.endpoint, timeout=config.request_timeout)
            validator = CaptionValidator(config, detector)
            report = validator.validate(config.file_path)
        except CapCheckError as e:
            logger.error(f"A CapCheck error occurred: {e}")
            return 1
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            return 1
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            return 2

        for failure in report.failures:
            reporter.report_failure(failure)
        return 0

def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    sys.exit(CLIHandler().run(argv))
