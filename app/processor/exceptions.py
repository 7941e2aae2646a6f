class ProcessorError(Exception):
    """Base exception for orchestration-level errors."""


class UnsupportedFormatError(ProcessorError):
    """Raised when the declared filename does not have a supported video extension."""


class UploadStagingError(ProcessorError):
    """Raised when the uploaded stream cannot be written to local disk."""
