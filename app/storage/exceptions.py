class StorageError(Exception):
    """Base exception for all storage backend errors."""


class UploadFailedError(StorageError):
    """Raised when an object cannot be written."""


class DownloadFailedError(StorageError):
    """Raised when an object exists but cannot be read."""


class DeleteFailedError(StorageError):
    """Raised when an object cannot be removed."""


class ObjectNotFoundError(StorageError):
    """Raised when a key does not exist in the backend."""


class PresignError(StorageError):
    """Raised when a download URL cannot be produced or fails validation."""
