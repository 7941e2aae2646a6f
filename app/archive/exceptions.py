class ArchiveBuildError(Exception):
    """Raised when a frame archive cannot be built in full."""
