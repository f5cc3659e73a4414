"""Exceptions raised by the scanner."""


class TagScanError(Exception):
    """Base exception for tagscan operations."""

    pass


class ConfigurationError(TagScanError):
    """Raised when the settings file can't be read or is malformed."""

    pass


class ExtractionError(TagScanError):
    """Raised when metadata can't be read from an audio file."""

    def __init__(self, path, message: str = None):
        self.path = str(path)
        super().__init__(message or f"Could not read metadata from {self.path}")


class NoTagsFound(ExtractionError):
    """Raised when a file has no tag container at all."""

    def __init__(self, path, message: str = None):
        super().__init__(path, message or f"No tags found in {path}")


class CodecError(ExtractionError):
    """Raised when probing or decoding a file fails."""

    def __init__(self, path, reason: str):
        self.reason = reason
        super().__init__(path, f"{reason}: {path}")
