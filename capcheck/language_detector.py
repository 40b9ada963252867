"""Detects the language of caption text through an external HTTP service."""

import logging
from abc import ABC, abstractmethod

import requests

from .exceptions import LanguageDetectionError

logger = logging.getLogger(__name__)

DEFAULT_EXPECTED_LANGUAGE = "en-US"

class LanguageDetector(ABC):
    """Abstract base class for language detection services."""

    @abstractmethod
    def detect(self, text: str) -> str:
        """
        Detects the language of the given text.

        Args:
            text: The text to classify.

        Returns:
            A language tag such as "en-US".

        Raises:
            LanguageDetectionError: If no language could be determined.
        """
        pass

class HttpLanguageDetector(LanguageDetector):
    """Posts text to a detection endpoint that answers with JSON {"lang": "<tag>"}."""

    def __init__(self, endpoint: str, timeout: float = 30.0):
        """
        Initializes the HttpLanguageDetector.

        Args:
            endpoint: URL of the language detection service.
            timeout: Seconds to wait for the whole request.
        """
        self.endpoint = endpoint
        self.timeout = timeout

    def detect(self, text: str) -> str:
        logger.debug(f"Requesting language detection from {self.endpoint} ({len(text)} chars)")
        try:
            response = requests.post(
                self.endpoint,
                data=text.encode('utf-8'),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Language detection request to {self.endpoint} failed: {e}")
            raise LanguageDetectionError(f"Request to {self.endpoint} failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Language detection returned HTTP {response.status_code}")
            raise LanguageDetectionError(f"Unexpected status {response.status_code} from {self.endpoint}")

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(f"Language detection returned invalid JSON: {e}")
            raise LanguageDetectionError(f"Invalid JSON from {self.endpoint}: {e}") from e

        lang = payload.get("lang") if isinstance(payload, dict) else None
        if not isinstance(lang, str):
            raise LanguageDetectionError(f"Response from {self.endpoint} has no 'lang' field")

        logger.info(f"Detected caption language: {lang}")
        return lang

def validate_language(text: str, detector: LanguageDetector, expected_language: str = DEFAULT_EXPECTED_LANGUAGE) -> bool:
    """
    Checks that the text is in the expected language.

    Empty text, a failed detection and a different language all give False.
    """
    if not text:
        logger.info("No caption text to run language detection on.")
        return False
    try:
        detected = detector.detect(text)
    except LanguageDetectionError as e:
        logger.warning(f"Language detection failed: {e}")
        return False
    return detected == expected_language
