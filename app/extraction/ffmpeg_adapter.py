import os
import re
import subprocess
from pathlib import Path

from app.extraction.base import BaseFrameExtractor
from app.extraction.exceptions import ExtractionFailedError, NoFramesProducedError
from app.extraction.models import Frame
from app.logging.logger import Log
from app.validation.paths import validate_no_shell_metacharacters, validate_no_traversal

FRAME_EXTENSION = "png"
FRAME_PATTERN = f"frame_%04d.{FRAME_EXTENSION}"
SAMPLING_FILTER = "fps=1"

_SEQUENCE_RE = re.compile(r"(\d+)$")


class FfmpegFrameExtractor(BaseFrameExtractor):
    """Samples one frame per second of video with the ffmpeg CLI."""

    def __init__(self, ffmpeg_path: str = "ffmpeg") -> None:
        self._ffmpeg_path = ffmpeg_path

    def extract(self, video_path: str | Path, workspace_dir: Path) -> list[Frame]:
        validate_no_traversal(str(video_path), workspace_dir.name)

        clean_video = os.path.normpath(str(video_path))
        clean_pattern = os.path.normpath(str(workspace_dir / FRAME_PATTERN))
        validate_no_shell_metacharacters(clean_video, clean_pattern)

        abs_video = os.path.abspath(clean_video)
        abs_pattern = os.path.abspath(clean_pattern)
        # Absolute forms are checked too: cwd may contribute characters.
        validate_no_shell_metacharacters(abs_video, abs_pattern)

        self._run(abs_video, abs_pattern)
        frames = self._collect(workspace_dir)
        Log.info(f"Extracted {len(frames)} frames", video=abs_video)
        return frames

    def _run(self, abs_video: str, abs_pattern: str) -> None:
        command = [
            self._ffmpeg_path,
            "-i", abs_video,
            "-vf", SAMPLING_FILTER,
            "-y",
            abs_pattern,
        ]
        Log.debug("Running ffmpeg", video=abs_video)
        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as exc:
            raise ExtractionFailedError(f"ffmpeg could not be started: {exc}") from exc

        if completed.returncode != 0:
            output = completed.stdout.decode("utf-8", errors="replace")
            raise ExtractionFailedError(
                f"ffmpeg exited with status {completed.returncode}\nOutput: {output}"
            )

    def _collect(self, workspace_dir: Path) -> list[Frame]:
        try:
            paths = sorted(workspace_dir.glob(f"*.{FRAME_EXTENSION}"))
        except OSError as exc:
            raise NoFramesProducedError(f"No frames were extracted from the video: {exc}") from exc
        if not paths:
            raise NoFramesProducedError("No frames were extracted from the video")
        return sorted(
            Frame(sequence=self._sequence(path, index), path=path)
            for index, path in enumerate(paths, start=1)
        )

    @staticmethod
    def _sequence(path: Path, fallback: int) -> int:
        match = _SEQUENCE_RE.search(path.stem)
        return int(match.group(1)) if match else fallback
