from abc import ABC, abstractmethod
from pathlib import Path

from app.extraction.models import Frame


class BaseFrameExtractor(ABC):
    """Contract for all frame extraction adapters."""

    @abstractmethod
    def extract(self, video_path: str | Path, workspace_dir: Path) -> list[Frame]:
        """Sample frames from a video into ``workspace_dir``.

        Args:
            video_path: Path to the source video on local disk.
            workspace_dir: Job workspace; the only directory written to.

        Returns:
            Frames in extraction order. Never empty.

        Raises:
            ExtractionFailedError: if the extraction tool fails.
            NoFramesProducedError: if no frames were written.
            PathValidationError: if an argument is unsafe.
        """
