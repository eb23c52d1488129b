"""
Custom exception hierarchy for the media timestamp fixer.

Per-file conditions are raised by the leaf components and recovered by the
batch runner, so one bad file never stops the rest of the batch.
"""


class TimestampFixerError(Exception):
    """Base exception for all timestamp fixer errors."""
    pass


class InvalidFilenameDateError(TimestampFixerError):
    """Raised when a filename matches the naming grammar but encodes an impossible date."""

    def __init__(self, filename: str, digits: str, reason: str = ""):
        self.filename = filename
        self.digits = digits
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid date '{digits}' in filename {filename}{detail}")


class MetadataProviderError(TimestampFixerError):
    """Raised when a metadata provider cannot be created or queried."""
    pass


class TimestampWriteError(TimestampFixerError):
    """Raised when writing a creation or modification time fails."""
    pass


class ConfigurationError(TimestampFixerError):
    """Raised for invalid command line or provider configuration."""
    pass
