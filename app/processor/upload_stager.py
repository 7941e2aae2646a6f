import os
import shutil
from pathlib import Path
from typing import BinaryIO

from app.logging.logger import Log
from app.processor.exceptions import UploadStagingError
from app.validation.paths import validate_within_root


def staged_upload_name(timestamp: str, declared_filename: str) -> str:
    """Build the staged filename: ``{timestamp}_{basename}``."""
    return f"{timestamp}_{os.path.basename(declared_filename)}"


class UploadStager:
    """Writes an uploaded stream to the uploads directory for ffmpeg to read."""

    UPLOADS_ROOT = Path("uploads")

    def __init__(self, uploads_root: Path | None = None) -> None:
        self._uploads_root = uploads_root if uploads_root is not None else self.UPLOADS_ROOT

    def stage(self, source: BinaryIO, declared_filename: str, timestamp: str) -> Path:
        """Copy ``source`` to disk and return the staged path.

        Raises:
            PathEscapesRootError: if the staged path leaves the uploads root.
            UploadStagingError: if the file cannot be written.
        """
        path = validate_within_root(
            self._uploads_root / staged_upload_name(timestamp, declared_filename),
            self._uploads_root,
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as handle:
                shutil.copyfileobj(source, handle)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise UploadStagingError(f"Failed to save uploaded file: {exc}") from exc
        Log.info(f"Staged upload {declared_filename}", path=path)
        return path

    def remove(self, path: Path) -> None:
        """Delete a staged upload. Failures are logged, never raised."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Failed to remove video file {path}: {exc}")
