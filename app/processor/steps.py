import os

from app.archive.builder import ARCHIVE_CONTENT_TYPE, ArchiveBuilder, archive_name
from app.extraction.base import BaseFrameExtractor
from app.logging.logger import Log
from app.processor.exceptions import UnsupportedFormatError
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.upload_stager import UploadStager
from app.storage.base import BaseStorageBackend
from app.storage.catalog import resolve_download_url
from app.storage.exceptions import StorageError
from app.validation.paths import (
    SUPPORTED_VIDEO_EXTENSIONS,
    is_supported_video,
    validate_no_shell_metacharacters,
    validate_no_traversal,
)
from app.workspace.workspace import WorkspaceManager


class ValidateRequestStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        filename = context.request.declared_filename
        validate_no_traversal(filename, context.timestamp)
        validate_no_shell_metacharacters(os.path.basename(filename), context.timestamp)
        if not is_supported_video(filename):
            raise UnsupportedFormatError(
                "Unsupported file format. Use: " + ", ".join(SUPPORTED_VIDEO_EXTENSIONS)
            )
        return context


class StageUploadStep(PipelineStep):
    def __init__(self, stager: UploadStager) -> None:
        self._stager = stager

    def run(self, context: PipelineContext) -> PipelineContext:
        context.video_path = self._stager.stage(
            context.request.source,
            context.request.declared_filename,
            context.timestamp,
        )
        return context


class RemoveStagedUploadStep(PipelineStep):
    def __init__(self, stager: UploadStager) -> None:
        self._stager = stager

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.video_path is not None:
            self._stager.remove(context.video_path)
        return context


class UploadSourceStep(PipelineStep):
    """Keeps a copy of the source video in the uploads bucket."""

    def __init__(self, source_store: BaseStorageBackend) -> None:
        self._source_store = source_store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.video_path is None:
            raise ValueError("PipelineContext.video_path must be set before source upload")
        key = context.video_path.name
        with open(context.video_path, "rb") as handle:
            self._source_store.put(key, handle)
        context.source_key = key
        Log.info("Source video uploaded", location=self._source_store.location, key=key)
        return context


class DeleteSourceObjectStep(PipelineStep):
    """Compensating delete: a failed job leaves no unprocessed upload behind."""

    def __init__(self, source_store: BaseStorageBackend) -> None:
        self._source_store = source_store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.source_key is None:
            return context
        try:
            self._source_store.delete(context.source_key)
        except StorageError as exc:
            Log.warning(f"Failed to clean up uploaded video {context.source_key}: {exc}")
            return context
        Log.info("Removed source video after failure", key=context.source_key)
        context.source_key = None
        return context


class AcquireWorkspaceStep(PipelineStep):
    def __init__(self, workspaces: WorkspaceManager) -> None:
        self._workspaces = workspaces

    def run(self, context: PipelineContext) -> PipelineContext:
        context.workspace = self._workspaces.acquire(context.timestamp)
        return context


class ReleaseWorkspaceStep(PipelineStep):
    def __init__(self, workspaces: WorkspaceManager) -> None:
        self._workspaces = workspaces

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.workspace is not None:
            self._workspaces.release(context.workspace)
            context.workspace = None
        return context


class ExtractFramesStep(PipelineStep):
    def __init__(self, extractor: BaseFrameExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.workspace is None or context.video_path is None:
            raise ValueError(
                "PipelineContext.workspace and video_path must be set before extraction"
            )
        context.frames = self._extractor.extract(
            context.video_path, context.workspace.root_path
        )
        Log.info(f"Extracted {len(context.frames)} frames", job=context.timestamp)
        return context


class BuildArchiveStep(PipelineStep):
    """Writes in place on backends that expose a path, in memory otherwise."""

    def __init__(self, builder: ArchiveBuilder, storage: BaseStorageBackend) -> None:
        self._builder = builder
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.frames:
            raise ValueError("PipelineContext.frames must be set before archiving")
        key = archive_name(context.timestamp)
        destination = self._storage.direct_path(key)
        if destination is not None:
            self._builder.build_to_path(context.frames, destination, self._storage.location)
        else:
            context.archive_bytes = self._builder.build(context.frames)
        context.archive_key = key
        return context


class PersistArchiveStep(PipelineStep):
    def __init__(self, storage: BaseStorageBackend) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.archive_bytes is None:
            return context
        if context.archive_key is None:
            raise ValueError("PipelineContext.archive_key must be set before persist")
        self._storage.put(context.archive_key, context.archive_bytes, ARCHIVE_CONTENT_TYPE)
        context.archive_bytes = None
        Log.info("Archive persisted", location=self._storage.location, key=context.archive_key)
        return context


class ResolveDownloadUrlStep(PipelineStep):
    def __init__(
        self,
        storage: BaseStorageBackend,
        fallback_prefix: str,
        ttl_seconds: int | None = None,
    ) -> None:
        self._storage = storage
        self._fallback_prefix = fallback_prefix
        self._ttl_seconds = ttl_seconds

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.archive_key is None:
            raise ValueError("PipelineContext.archive_key must be set before download URL")
        context.download_url = resolve_download_url(
            self._storage, context.archive_key, self._fallback_prefix, self._ttl_seconds
        )
        return context
