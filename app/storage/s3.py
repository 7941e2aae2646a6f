"""S3-compatible object storage backend."""

from __future__ import annotations

import io
import os
from typing import Any, BinaryIO
from urllib.parse import urlsplit

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from app.logging.logger import Log
from app.storage.base import BaseStorageBackend, StorageData, StoredObject
from app.storage.exceptions import (
    DeleteFailedError,
    DownloadFailedError,
    ObjectNotFoundError,
    PresignError,
    StorageError,
    UploadFailedError,
)

DEFAULT_CONTENT_TYPE = "binary/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".zip": "application/zip",
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",
    ".wmv": "video/x-ms-wmv",
    ".flv": "video/x-flv",
    ".webm": "video/webm",
}

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def content_type_for(key: str) -> str:
    """Resolve a content type from the key's file extension."""
    return CONTENT_TYPES.get(os.path.splitext(key)[1].lower(), DEFAULT_CONTENT_TYPE)


def _is_not_found(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code", "")) in _NOT_FOUND_CODES


class S3StorageBackend(BaseStorageBackend):
    """Storage backend over a single bucket of an S3-compatible store.

    Works against AWS S3 as well as local stand-ins (LocalStack, MinIO)
    reached through a custom endpoint. Presigned URLs are checked before they
    are handed back: plain ``http`` is accepted only for a custom endpoint.
    """

    def __init__(
        self,
        bucket: str,
        client: Any,
        *,
        presign_client: Any | None = None,
        endpoint_url: str | None = None,
        presigned_ttl_seconds: int = 3600,
    ) -> None:
        """Initialize the backend.

        Args:
            bucket: Bucket holding every key of this backend.
            client: boto3 S3 client used for data operations.
            presign_client: Client used only to sign URLs; lets a local
                endpoint sign against its browser-reachable address.
            endpoint_url: Custom endpoint, set for local development stores.
            presigned_ttl_seconds: Default lifetime of presigned URLs.
        """
        self._bucket = bucket
        self._client = client
        self._presign_client = presign_client if presign_client is not None else client
        self._endpoint_url = endpoint_url or ""
        self._presigned_ttl_seconds = presigned_ttl_seconds

    @property
    def location(self) -> str:
        return self._bucket

    @property
    def is_local_endpoint(self) -> bool:
        return bool(self._endpoint_url)

    def put(self, key: str, data: StorageData, content_type: str | None = None) -> None:
        resolved_type = content_type or content_type_for(key)
        body: BinaryIO = io.BytesIO(data) if isinstance(data, bytes) else data
        try:
            self._client.upload_fileobj(
                body,
                self._bucket,
                key,
                ExtraArgs={"ContentType": resolved_type},
            )
        except (ClientError, BotoCoreError, S3UploadFailedError) as exc:
            raise UploadFailedError(
                f"Failed to upload s3://{self._bucket}/{key}: {exc}"
            ) from exc
        Log.info(
            "Uploaded object",
            uri=f"s3://{self._bucket}/{key}",
            content_type=resolved_type,
        )

    def get(self, key: str) -> BinaryIO:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(f"Object not found: {key}") from exc
            raise DownloadFailedError(
                f"Failed to download s3://{self._bucket}/{key}: {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise DownloadFailedError(
                f"Failed to download s3://{self._bucket}/{key}: {exc}"
            ) from exc
        body: BinaryIO = response["Body"]
        return body

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise DeleteFailedError(
                f"Failed to delete s3://{self._bucket}/{key}: {exc}"
            ) from exc
        Log.info("Deleted object", uri=f"s3://{self._bucket}/{key}")

    def exists(self, key: str) -> bool:
        try:
            self._head(key)
        except ObjectNotFoundError:
            return False
        return True

    def stat(self, key: str) -> StoredObject:
        response = self._head(key)
        return StoredObject(
            bucket_or_root=self._bucket,
            key=key,
            size=int(response["ContentLength"]),
            last_modified=response["LastModified"],
        )

    def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        expires_in = self._presigned_ttl_seconds if ttl_seconds is None else ttl_seconds
        try:
            url: str = self._presign_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise PresignError(f"Failed to generate presigned URL for {key}: {exc}") from exc

        self.validate_url(url)
        Log.debug(
            "Generated presigned URL",
            uri=f"s3://{self._bucket}/{key}",
            expires_in=expires_in,
        )
        return url

    def validate_url(self, url: str) -> None:
        """Check a URL before it leaves the backend.

        Raises:
            PresignError: if the URL is malformed, has no host, or is not
                ``https`` outside of a local development endpoint.
        """
        try:
            parts = urlsplit(url)
        except ValueError as exc:
            raise PresignError(f"Invalid URL format: {exc}") from exc
        if parts.scheme not in ("http", "https"):
            raise PresignError(f"Unsupported URL scheme: {parts.scheme!r}")
        if not self.is_local_endpoint and parts.scheme != "https":
            raise PresignError(f"HTTPS required in production, got: {parts.scheme}")
        if not parts.netloc:
            raise PresignError("URL must have a valid host")

    def list(self, prefix: str = "") -> list[str]:
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(
                f"Failed to list s3://{self._bucket}/{prefix}: {exc}"
            ) from exc
        return sorted(keys)

    def _head(self, key: str) -> dict[str, Any]:
        try:
            response: dict[str, Any] = self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(f"Object not found: {key}") from exc
            raise DownloadFailedError(
                f"Failed to inspect s3://{self._bucket}/{key}: {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise DownloadFailedError(
                f"Failed to inspect s3://{self._bucket}/{key}: {exc}"
            ) from exc
        return response
