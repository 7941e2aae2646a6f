import shutil
import subprocess
from pathlib import Path

import pytest

from app.config.settings import Settings

VIDEO_SECONDS = 5


@pytest.fixture(scope="session")
def ffmpeg_path() -> str:
    path = shutil.which("ffmpeg")
    if path is None:
        pytest.skip("ffmpeg binary not available on PATH")
    return path


@pytest.fixture(scope="session")
def sample_video(ffmpeg_path: str, tmp_path_factory: pytest.TempPathFactory) -> Path:
    """A short synthetic test-pattern clip, generated once per session."""
    path = tmp_path_factory.mktemp("videos") / "sample.mp4"
    completed = subprocess.run(
        [
            ffmpeg_path,
            "-f", "lavfi",
            "-i", f"testsrc=duration={VIDEO_SECONDS}:size=64x64:rate=10",
            "-pix_fmt", "yuv420p",
            "-y",
            str(path),
        ],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=False,
    )
    if completed.returncode != 0:
        pytest.skip(f"ffmpeg could not generate a test video: {completed.stdout[-500:]!r}")
    return path


@pytest.fixture
def ffmpeg_settings(tmp_path: Path, ffmpeg_path: str) -> Settings:
    return Settings(
        uploads_dir=str(tmp_path / "uploads"),
        outputs_dir=str(tmp_path / "outputs"),
        temp_dir=str(tmp_path / "temp"),
        storage_backend="local",
        ffmpeg_path=ffmpeg_path,
    )
