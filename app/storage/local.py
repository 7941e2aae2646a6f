"""Local filesystem storage backend."""

from __future__ import annotations

import io
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from app.logging.logger import Log
from app.storage.base import BaseStorageBackend, StorageData, StoredObject
from app.storage.exceptions import (
    DeleteFailedError,
    DownloadFailedError,
    ObjectNotFoundError,
    UploadFailedError,
)
from app.validation.exceptions import PathValidationError
from app.validation.paths import validate_no_traversal, validate_within_root


class LocalStorageBackend(BaseStorageBackend):
    """Stores objects as files under a root directory.

    Every key is resolved through the same containment check used for
    archive output paths, so a key can never address a file outside ``root``.
    Download URLs are API paths served by the HTTP layer.
    """

    def __init__(self, root: str | Path, download_prefix: str = "/api/v1/videos") -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._download_prefix = download_prefix.rstrip("/")

    @property
    def location(self) -> str:
        return str(self._root)

    def direct_path(self, key: str) -> Path | None:
        return self._resolve(key)

    def put(self, key: str, data: StorageData, content_type: str | None = None) -> None:
        path = self._resolve(key)
        source: BinaryIO = io.BytesIO(data) if isinstance(data, bytes) else data
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as handle:
                shutil.copyfileobj(source, handle)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise UploadFailedError(f"Failed to write {key}: {exc}") from exc
        Log.info("Stored object", root=self._root, key=key)

    def get(self, key: str) -> BinaryIO:
        path = self._existing(key)
        try:
            return open(path, "rb")
        except OSError as exc:
            raise DownloadFailedError(f"Failed to read {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._existing(key)
        try:
            path.unlink()
        except OSError as exc:
            raise DeleteFailedError(f"Failed to delete {key}: {exc}") from exc
        Log.info("Deleted object", root=self._root, key=key)

    def exists(self, key: str) -> bool:
        try:
            return self._resolve(key).is_file()
        except PathValidationError:
            return False

    def stat(self, key: str) -> StoredObject:
        path = self._existing(key)
        try:
            info = path.stat()
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(f"Object not found: {key}") from exc
        except OSError as exc:
            raise DownloadFailedError(f"Failed to inspect {key}: {exc}") from exc
        return StoredObject(
            bucket_or_root=str(self._root),
            key=key,
            size=info.st_size,
            last_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
        )

    def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        self._existing(key)
        return f"{self._download_prefix}/{key}/download"

    def list(self, prefix: str = "") -> list[str]:
        if not self._root.is_dir():
            return []
        keys = (
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        )
        return sorted(key for key in keys if key.startswith(prefix))

    def _resolve(self, key: str) -> Path:
        validate_no_traversal(key, "")
        return validate_within_root(self._root / key, self._root)

    def _existing(self, key: str) -> Path:
        path = self._resolve(key)
        if not path.is_file():
            raise ObjectNotFoundError(f"Object not found: {key}")
        return path
