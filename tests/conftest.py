"""
Pytest configuration for CapCheck tests.

Shared fixtures for caption text, entries and a stand-in language detector.
"""

import logging
from datetime import timedelta
from logging.handlers import RotatingFileHandler

import pytest

from capcheck.exceptions import LanguageDetectionError
from capcheck.language_detector import LanguageDetector
from capcheck.models import CaptionEntry


SAMPLE_SRT = """1
00:00:01,000 --> 00:00:04,000
Hello world

2
00:00:05,000 --> 00:00:08,000
Second line
"""

SAMPLE_VTT = """WEBVTT

NOTE created for tests

00:00:01.000 --> 00:00:04.000
Hello world

00:00:05.000 --> 00:00:08.000
Second line
"""


class StubDetector(LanguageDetector):
    """Returns a fixed tag (or fails) and records what it was asked."""

    def __init__(self, lang="en-US", error=None):
        self.lang = lang
        self.error = error
        self.calls = []

    def detect(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise LanguageDetectionError(self.error)
        return self.lang


def seconds(value):
    return timedelta(seconds=value)


def entry(start, end, text=""):
    """Builds an entry from start/end given in seconds."""
    return CaptionEntry(start=seconds(start), end=seconds(end), text=text)


@pytest.fixture
def srt_file(tmp_path):
    path = tmp_path / "sample.srt"
    path.write_text(SAMPLE_SRT, encoding="utf-8")
    return path


@pytest.fixture
def vtt_file(tmp_path):
    path = tmp_path / "sample.vtt"
    path.write_text(SAMPLE_VTT, encoding="utf-8")
    return path


@pytest.fixture
def english_detector():
    return StubDetector("en-US")


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drops the handlers setup_logging() installs so they don't leak between tests."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
