import io
import shutil
import zipfile
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from app.archive.exceptions import ArchiveBuildError
from app.extraction.models import Frame
from app.logging.logger import Log
from app.validation.paths import validate_within_root

ARCHIVE_EXTENSION = "zip"
ARCHIVE_CONTENT_TYPE = "application/zip"


def archive_name(timestamp: str) -> str:
    """Archive filename for a job: ``frames_<timestamp>.zip``."""
    return f"frames_{timestamp}.{ARCHIVE_EXTENSION}"


class ArchiveBuilder:
    """Packages frames into a flat, deflate-compressed ZIP archive.

    Entries are written in the order given and named by the frame's basename,
    so no entry name can carry a directory component. A build either writes
    every frame or fails as a whole.
    """

    def build(self, frames: Sequence[Frame]) -> bytes:
        """Build the archive in memory, for upload to a remote backend."""
        buffer = io.BytesIO()
        self._write(buffer, frames)
        data = buffer.getvalue()
        Log.info(f"Built in-memory archive with {len(frames)} entries", size=len(data))
        return data

    def build_to_path(
        self,
        frames: Sequence[Frame],
        output_path: str | Path,
        outputs_root: str | Path,
    ) -> Path:
        """Build the archive directly at ``output_path`` inside ``outputs_root``.

        Raises:
            PathEscapesRootError: if ``output_path`` is outside ``outputs_root``.
            ArchiveBuildError: if any frame cannot be read or the file written.
        """
        destination = validate_within_root(output_path, outputs_root)
        try:
            with open(destination, "wb") as handle:
                self._write(handle, frames)
        except ArchiveBuildError:
            destination.unlink(missing_ok=True)
            raise
        except OSError as exc:
            destination.unlink(missing_ok=True)
            raise ArchiveBuildError(f"Could not create archive file: {exc}") from exc
        Log.info(f"Archive written with {len(frames)} entries", path=destination)
        return destination

    def _write(self, target: BinaryIO, frames: Sequence[Frame]) -> None:
        try:
            with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for frame in frames:
                    self._add_frame(archive, frame)
        except ArchiveBuildError:
            raise
        except (OSError, zipfile.BadZipFile, ValueError) as exc:
            raise ArchiveBuildError(f"Failed to finalize archive: {exc}") from exc

    def _add_frame(self, archive: zipfile.ZipFile, frame: Frame) -> None:
        try:
            info = zipfile.ZipInfo.from_file(frame.path, arcname=frame.path.name)
            info.compress_type = zipfile.ZIP_DEFLATED
            with open(frame.path, "rb") as source, archive.open(info, "w") as entry:
                shutil.copyfileobj(source, entry)
        except OSError as exc:
            raise ArchiveBuildError(
                f"Failed to add {frame.path.name} to archive: {exc}"
            ) from exc
