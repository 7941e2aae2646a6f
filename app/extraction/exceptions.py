class FrameExtractionError(Exception):
    """Base exception for frame extraction failures."""


class ExtractionFailedError(FrameExtractionError):
    """Raised when the extraction tool exits non-zero or cannot be started."""


class NoFramesProducedError(FrameExtractionError):
    """Raised when extraction reported success but wrote no frames."""
