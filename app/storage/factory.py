from typing import Any, ClassVar

import boto3
from botocore.config import Config

from app.config.settings import Settings
from app.storage.base import BaseStorageBackend
from app.storage.local import LocalStorageBackend
from app.storage.s3 import S3StorageBackend

DEFAULT_LOCAL_EXTERNAL_URL = "http://localhost:4566"


class StorageFactory:
    """Creates the configured storage backend."""

    BACKENDS: ClassVar[tuple[str, ...]] = ("local", "s3")

    @classmethod
    def create(cls, settings: Settings, *, bucket: str, root: str) -> BaseStorageBackend:
        """Create the backend selected by ``settings.storage_backend``.

        Args:
            settings: Application settings.
            bucket: Bucket used when the object-store backend is selected.
            root: Directory used when the local backend is selected.
        """
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalStorageBackend(root, download_prefix=settings.download_url_prefix)
        if backend == "s3":
            return S3StorageBackend(
                bucket,
                cls._client(settings, settings.aws_endpoint_url),
                presign_client=cls._presign_client(settings),
                endpoint_url=settings.aws_endpoint_url or None,
                presigned_ttl_seconds=settings.presigned_url_ttl_seconds,
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )

    @classmethod
    def create_outputs(cls, settings: Settings) -> BaseStorageBackend:
        return cls.create(settings, bucket=settings.s3_bucket_outputs, root=settings.outputs_dir)

    @classmethod
    def create_uploads(cls, settings: Settings) -> BaseStorageBackend | None:
        """Source-video store; only the object-store mode keeps uploads remotely."""
        if not settings.is_s3_enabled:
            return None
        return cls.create(settings, bucket=settings.s3_bucket_uploads, root=settings.uploads_dir)

    @classmethod
    def _client(cls, settings: Settings, endpoint_url: str) -> Any:
        kwargs: dict[str, Any] = {"region_name": settings.aws_region}
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
            kwargs["config"] = Config(s3={"addressing_style": "path"})
        return boto3.client("s3", **kwargs)

    @classmethod
    def _presign_client(cls, settings: Settings) -> Any | None:
        """Local endpoints sign against the browser-reachable address."""
        if not settings.is_local_endpoint:
            return None
        external_url = settings.aws_external_url or DEFAULT_LOCAL_EXTERNAL_URL
        return cls._client(settings, external_url)
