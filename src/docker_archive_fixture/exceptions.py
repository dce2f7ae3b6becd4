"""Custom exceptions for the docker test archive builder."""


class ImageArchiveError(Exception):
    """Base exception for all archive build errors."""

    pass


class StagingError(ImageArchiveError):
    """Raised when a staging directory or file cannot be created or removed.

    ``reason`` holds the OS-level cause without the path, for callers that
    name the path themselves.
    """

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class ManifestError(ImageArchiveError):
    """Raised when an entrypoint or cmd literal is not valid JSON."""

    pass


class RootfsError(ImageArchiveError):
    """Raised when a layer root filesystem cannot be populated."""

    pass


class ArchiveCommandError(ImageArchiveError):
    """Raised when archiving fails or is discarded."""

    pass


class TarReadError(ImageArchiveError):
    """Raised when unable to read a produced tar file."""

    pass


class ValidationError(ImageArchiveError):
    """Raised when a produced tar file is missing or has invalid members."""

    pass
