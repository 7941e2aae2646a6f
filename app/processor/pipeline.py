from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from app.extraction.models import Frame
from app.processor.models import ProcessingRequest
from app.workspace.workspace import Workspace


@dataclass(slots=True)
class PipelineContext:
    request: ProcessingRequest
    video_path: Path | None = None
    source_key: str | None = None
    workspace: Workspace | None = None
    frames: list[Frame] = field(default_factory=list)
    archive_key: str | None = None
    archive_bytes: bytes | None = None
    download_url: str | None = None
    error_message: str = ""

    @property
    def timestamp(self) -> str:
        return self.request.job_timestamp


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
