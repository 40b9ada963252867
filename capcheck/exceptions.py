"""Custom Exceptions for the CapCheck application."""

class CapCheckError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(CapCheckError):
    """Exception raised for errors in configuration loading or flag validation."""
    pass

class FileSystemError(CapCheckError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass

class CaptionParseError(CapCheckError):
    """Exception raised when a caption file cannot be read or parsed."""
    pass

class UnsupportedFormatError(CaptionParseError):
    """Exception raised for caption files that are neither SRT nor WebVTT."""
    pass

class TimestampError(CaptionParseError):
    """Base class for timestamp conversion failures."""
    pass

class InvalidTimeFormatError(TimestampError):
    """The timestamp does not have exactly three ':'-separated components."""
    pass

class InvalidSecondsFormatError(TimestampError):
    """The seconds component does not split into seconds and milliseconds."""
    pass

class InvalidDigitsError(TimestampError):
    """A timestamp component is not a number."""
    pass

class LanguageDetectionError(CapCheckError):
    """Exception raised when the language detection service gives no usable answer."""
    pass
