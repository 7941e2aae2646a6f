"""Capability contract shared by all storage backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

StorageData = bytes | BinaryIO


@dataclass(frozen=True)
class StoredObject:
    """Metadata for a persisted object."""

    bucket_or_root: str
    key: str
    size: int
    last_modified: datetime


class BaseStorageBackend(ABC):
    """Contract for local-disk and object-store persistence.

    Keys are flat, slash-separated names relative to the backend's root or
    bucket. The processing pipeline depends only on this interface.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Root directory or bucket name, for logs and StoredObject."""

    @abstractmethod
    def put(self, key: str, data: StorageData, content_type: str | None = None) -> None:
        """Store ``data`` under ``key``.

        Raises:
            UploadFailedError: if the write fails.
        """

    @abstractmethod
    def get(self, key: str) -> BinaryIO:
        """Open a stream over the object's bytes. Caller closes it.

        Raises:
            ObjectNotFoundError: if the key does not exist.
            DownloadFailedError: if the object cannot be read.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object.

        Raises:
            DeleteFailedError: if removal fails.
        """

    @abstractmethod
    def list(self, prefix: str = "") -> list[str]:
        """Return all keys starting with ``prefix``, sorted."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if the key exists."""

    @abstractmethod
    def stat(self, key: str) -> StoredObject:
        """Return size and modification time.

        Raises:
            ObjectNotFoundError: if the key does not exist.
        """

    @abstractmethod
    def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        """Return a URL (or API path) through which the object can be downloaded.

        Raises:
            ObjectNotFoundError: if the key does not exist (local backend).
            PresignError: if no valid URL can be produced.
        """

    def direct_path(self, key: str) -> Path | None:
        """Filesystem path to write ``key`` in place, or None if it must be ``put``."""
        return None
