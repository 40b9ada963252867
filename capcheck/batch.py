"""Validates every caption file in a directory."""

import argparse
import logging
import os
import sys
from typing import List, Optional

# Progress bar library
from tqdm import tqdm

from .caption_parser import is_valid_file_type
from .cli import add_validation_arguments, build_config, load_file_config
from .exceptions import CapCheckError, ConfigurationError
from .language_detector import HttpLanguageDetector
from .log_setup import setup_logging
from .reporter import JsonLineReporter
from .validator import CaptionValidator

logger = logging.getLogger(__name__)

def find_caption_files(input_dir: str, recursive: bool = False) -> List[str]:
    """
    Finds all .srt and .vtt files in the input directory, sorted by path.

    Args:
        input_dir: The directory to search.
        recursive: Also search subdirectories.

    Returns:
        Sorted list of file paths.

    Raises:
        FileNotFoundError: If the input directory doesn't exist.
        ValueError: If the input path is not a directory.
    """
    if not os.path.exists(input_dir):
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not os.path.isdir(input_dir):
        raise ValueError(f"Input path is not a directory: {input_dir}")

    logger.info(f"Scanning directory for caption files: {input_dir}")
    found = []
    if recursive:
        for root, _dirs, filenames in os.walk(input_dir):
            found.extend(os.path.join(root, name) for name in filenames)
    else:
        found = [os.path.join(input_dir, name) for name in os.listdir(input_dir)]

    captions = sorted(path for path in found if os.path.isfile(path) and is_valid_file_type(path))
    logger.info(f"Found {len(captions)} caption files.")
    return captions

def run_batch(argv: Optional[List[str]] = None) -> int:
    """Parses arguments and validates each caption file in the directory."""
    parser = argparse.ArgumentParser(
        description="CapCheck Batch: validate every .srt/.vtt file in a directory.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-i", "--input-dir",
        required=True,
        help="Directory containing the caption files."
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Include caption files in subdirectories."
    )
    add_validation_arguments(parser)
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level for console and file output."
    )
    args = parser.parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(log_level=log_level)

    try:
        config = build_config(args, load_file_config(args.config), require_file=False)
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1

    if config.log_dir:
        setup_logging(log_level=log_level, log_dir=config.log_dir, log_file=config.log_file)

    try:
        caption_files = find_caption_files(args.input_dir, recursive=args.recursive)
    except (FileNotFoundError, ValueError) as e:
        logger.critical(str(e))
        return 1
    if not caption_files:
        logger.warning(f"No .srt or .vtt files found in {args.input_dir}. Exiting.")
        return 1

    detector = HttpLanguageDetector(config.endpoint, timeout=config.request_timeout)
    validator = CaptionValidator(config, detector)
    reporter = JsonLineReporter()

    passed = 0
    try:
        for file_path in tqdm(caption_files, desc="Validating captions", unit="file"):
            try:
                report = validator.validate(file_path)
            except CapCheckError as e:
                logger.error(f"Skipping {file_path}: {e}")
                continue
            for failure in report.failures:
                reporter.report_failure(failure, file=file_path)
            if report.passed:
                passed += 1
    except KeyboardInterrupt:
        logger.warning("Batch interrupted by user (Ctrl+C). Exiting.")
        return 1

    logger.info(f"Batch finished: {passed}/{len(caption_files)} caption files passed.")
    return 0

def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    sys.exit(run_batch(argv))
