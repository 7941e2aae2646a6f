from collections.abc import Sequence
from pathlib import Path

from app.archive.builder import ArchiveBuilder
from app.archive.exceptions import ArchiveBuildError
from app.config.settings import Settings
from app.extraction.base import BaseFrameExtractor
from app.extraction.exceptions import FrameExtractionError
from app.extraction.ffmpeg_adapter import FfmpegFrameExtractor
from app.logging.logger import Log
from app.processor.exceptions import ProcessorError
from app.processor.models import ProcessingRequest, ProcessingResult
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.steps import (
    AcquireWorkspaceStep,
    BuildArchiveStep,
    DeleteSourceObjectStep,
    ExtractFramesStep,
    PersistArchiveStep,
    ReleaseWorkspaceStep,
    RemoveStagedUploadStep,
    ResolveDownloadUrlStep,
    StageUploadStep,
    UploadSourceStep,
    ValidateRequestStep,
)
from app.processor.upload_stager import UploadStager
from app.storage.base import BaseStorageBackend
from app.storage.exceptions import StorageError
from app.storage.factory import StorageFactory
from app.validation.exceptions import PathValidationError
from app.workspace.exceptions import TempDirUnavailableError
from app.workspace.workspace import WorkspaceManager

EXPECTED_ERRORS: tuple[type[Exception], ...] = (
    PathValidationError,
    TempDirUnavailableError,
    FrameExtractionError,
    ArchiveBuildError,
    StorageError,
    ProcessorError,
)


class Processor:
    """Runs one video through the frame pipeline and reports the outcome.

    Pipeline: validate -> stage -> [upload source] -> acquire workspace ->
    extract -> archive -> [persist] -> download URL.

    The first failing step ends the run. ``failure_steps`` then undo remote
    side effects, and ``cleanup_steps`` always run last, whatever happened.
    Expected failures come back as ``ProcessingResult(success=False)``.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        cleanup_steps: Sequence[PipelineStep] = (),
        failure_steps: Sequence[PipelineStep] = (),
    ) -> None:
        self._steps = list(steps)
        self._cleanup_steps = list(cleanup_steps)
        self._failure_steps = list(failure_steps)

    def process(self, request: ProcessingRequest) -> ProcessingResult:
        """Process one request. Never raises for pipeline failures."""
        Log.info(f"Processing started: {request.declared_filename}", job=request.job_timestamp)
        context = PipelineContext(request=request)
        try:
            for step in self._steps:
                context = step.run(context)
        except EXPECTED_ERRORS as exc:
            return self._fail(context, str(exc))
        except Exception as exc:
            Log.error(f"Unexpected error in job {request.job_timestamp}: {exc!r}")
            return self._fail(context, f"Unexpected processing error: {exc}")
        finally:
            self._run_all(self._cleanup_steps, context)

        Log.info(
            f"Processing finished with {len(context.frames)} frames",
            job=request.job_timestamp,
            archive=context.archive_key,
        )
        return ProcessingResult(
            success=True,
            message=f"Processing complete! {len(context.frames)} frames extracted.",
            archive_key=context.archive_key,
            download_url=context.download_url,
            frame_count=len(context.frames),
            frame_names=[frame.name for frame in context.frames],
        )

    def _fail(self, context: PipelineContext, message: str) -> ProcessingResult:
        context.error_message = message
        Log.error(f"Job {context.timestamp} failed: {message}")
        self._run_all(self._failure_steps, context)
        return ProcessingResult.failure(message)

    @staticmethod
    def _run_all(steps: Sequence[PipelineStep], context: PipelineContext) -> None:
        for step in steps:
            try:
                step.run(context)
            except Exception as exc:
                Log.error(f"{type(step).__name__} failed for job {context.timestamp}: {exc}")


def build_processor(
    settings: Settings,
    *,
    extractor: BaseFrameExtractor | None = None,
    outputs: BaseStorageBackend | None = None,
    uploads: BaseStorageBackend | None = None,
) -> Processor:
    """Build a Processor with all required adapters.

    ``uploads`` defaults to the uploads bucket in object-store mode and to
    nothing in local mode; pass a backend to override either way.
    """
    stager = UploadStager(uploads_root=Path(settings.uploads_dir))
    workspaces = WorkspaceManager(settings.temp_dir)
    frame_extractor = extractor or FfmpegFrameExtractor(ffmpeg_path=settings.ffmpeg_path)
    archive_store = outputs or StorageFactory.create_outputs(settings)
    source_store = uploads if uploads is not None else StorageFactory.create_uploads(settings)

    steps: list[PipelineStep] = [
        ValidateRequestStep(),
        StageUploadStep(stager),
    ]
    failure_steps: list[PipelineStep] = []
    if source_store is not None:
        steps.append(UploadSourceStep(source_store))
        failure_steps.append(DeleteSourceObjectStep(source_store))
    steps += [
        AcquireWorkspaceStep(workspaces),
        ExtractFramesStep(frame_extractor),
        BuildArchiveStep(ArchiveBuilder(), archive_store),
        PersistArchiveStep(archive_store),
        ResolveDownloadUrlStep(
            archive_store,
            fallback_prefix=settings.download_url_prefix,
            ttl_seconds=settings.presigned_url_ttl_seconds,
        ),
    ]
    cleanup_steps: list[PipelineStep] = [
        ReleaseWorkspaceStep(workspaces),
        RemoveStagedUploadStep(stager),
    ]
    return Processor(steps=steps, cleanup_steps=cleanup_steps, failure_steps=failure_steps)
