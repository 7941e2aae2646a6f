from dataclasses import dataclass
from datetime import datetime

from app.logging.logger import Log
from app.storage.base import BaseStorageBackend
from app.storage.exceptions import StorageError


@dataclass(frozen=True)
class ArchiveInfo:
    """A finished archive as listed to callers."""

    filename: str
    size: int
    created_at: datetime
    download_url: str


def api_download_path(prefix: str, key: str) -> str:
    return f"{prefix.rstrip('/')}/{key}/download"


def resolve_download_url(
    storage: BaseStorageBackend,
    key: str,
    fallback_prefix: str,
    ttl_seconds: int | None = None,
) -> str:
    """Presign ``key``, falling back to the API download path on failure."""
    try:
        return storage.presign(key, ttl_seconds)
    except StorageError as exc:
        Log.warning(f"Failed to generate download URL for {key}: {exc}")
        return api_download_path(fallback_prefix, key)


def list_archives(
    storage: BaseStorageBackend,
    fallback_prefix: str,
    ttl_seconds: int | None = None,
) -> list[ArchiveInfo]:
    """List every ``.zip`` object in ``storage``; unreadable entries are skipped."""
    archives: list[ArchiveInfo] = []
    for key in storage.list():
        if not key.endswith(".zip"):
            continue
        try:
            info = storage.stat(key)
        except StorageError as exc:
            Log.warning(f"Failed to get file info for {key}: {exc}")
            continue
        archives.append(
            ArchiveInfo(
                filename=key.rsplit("/", 1)[-1],
                size=info.size,
                created_at=info.last_modified,
                download_url=resolve_download_url(storage, key, fallback_prefix, ttl_seconds),
            )
        )
    return archives
