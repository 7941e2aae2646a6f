"""Persistence for finished frame archives.

Two interchangeable backends implement the same capability set: a local
directory and an S3-compatible bucket.
"""

from app.storage.base import BaseStorageBackend, StoredObject
from app.storage.factory import StorageFactory
from app.storage.local import LocalStorageBackend
from app.storage.s3 import S3StorageBackend

__all__ = [
    "BaseStorageBackend",
    "LocalStorageBackend",
    "S3StorageBackend",
    "StorageFactory",
    "StoredObject",
]
