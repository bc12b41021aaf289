"""Exceptions raised while converting input files."""

from pathlib import Path


class ConversionError(Exception):
    """Base class for conversion failures."""


class ConfigurationError(ConversionError):
    """Options are invalid or do not fit the input."""


class UnsupportedFormatError(ConfigurationError):
    """The requested output format is not one of the supported formats."""


class UnsupportedInputError(ConversionError):
    """The input file type has no handler."""

    def __init__(self, path: Path) -> None:
        """Keep the rejected path."""
        self.path = path
        super().__init__(f"Unsupported input file type: {path}")


class InvalidInputError(ConversionError):
    """Input content does not have the expected shape."""


class FileProcessingError(ConversionError):
    """Reading or writing a file failed."""

    def __init__(self, path: Path, reason: str) -> None:
        """Keep the path the failure happened on."""
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
