import io
from pathlib import Path

import pytest

from app.config.settings import Settings
from app.extraction.base import BaseFrameExtractor
from app.extraction.exceptions import ExtractionFailedError
from app.extraction.models import Frame

# PNG signature plus filler; nothing here decodes the image.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"frame-pixels" * 16


def write_frames(directory: Path, count: int) -> list[Frame]:
    directory.mkdir(parents=True, exist_ok=True)
    frames = []
    for sequence in range(1, count + 1):
        path = directory / f"frame_{sequence:04d}.png"
        path.write_bytes(PNG_BYTES)
        frames.append(Frame(sequence=sequence, path=path))
    return frames


class FakeFrameExtractor(BaseFrameExtractor):
    """Writes a fixed number of frames into the workspace instead of running ffmpeg."""

    def __init__(self, frame_count: int = 5, error: Exception | None = None) -> None:
        self.frame_count = frame_count
        self.error = error
        self.calls: list[tuple[Path, Path]] = []

    def extract(self, video_path: str | Path, workspace_dir: Path) -> list[Frame]:
        self.calls.append((Path(video_path), workspace_dir))
        if self.error is not None:
            raise self.error
        return write_frames(workspace_dir, self.frame_count)


@pytest.fixture()
def frames(tmp_path: Path) -> list[Frame]:
    """Five PNG frames on disk."""
    return write_frames(tmp_path / "frames", 5)


@pytest.fixture()
def video_stream() -> io.BytesIO:
    return io.BytesIO(b"\x00\x00\x00\x18ftypmp42 not really a video")


@pytest.fixture()
def fake_extractor() -> FakeFrameExtractor:
    return FakeFrameExtractor(frame_count=5)


@pytest.fixture()
def failing_extractor() -> FakeFrameExtractor:
    return FakeFrameExtractor(error=ExtractionFailedError("ffmpeg exited with status 1"))


@pytest.fixture()
def local_settings(tmp_path: Path) -> Settings:
    """Settings for local-disk mode with every directory under tmp_path."""
    return Settings(
        uploads_dir=str(tmp_path / "uploads"),
        outputs_dir=str(tmp_path / "outputs"),
        temp_dir=str(tmp_path / "temp"),
        storage_backend="local",
    )


@pytest.fixture()
def make_frames():  # type: ignore[no-untyped-def]
    """Factory writing ``count`` frames into a directory."""
    return write_frames
