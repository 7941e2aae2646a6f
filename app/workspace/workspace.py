import shutil
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from app.logging.logger import Log
from app.validation.exceptions import PathValidationError
from app.validation.paths import validate_no_traversal, validate_within_root
from app.workspace.exceptions import TempDirUnavailableError

WORKSPACE_MODE = 0o700


@dataclass(frozen=True)
class Workspace:
    """Ephemeral directory owned by a single processing job."""

    root_path: Path
    timestamp: str


class WorkspaceManager:
    """Creates and removes per-job directories under a base temp dir."""

    def __init__(self, base_temp_dir: str | Path) -> None:
        self._base_dir = Path(base_temp_dir)

    def acquire(self, timestamp: str) -> Workspace:
        """Create ``<base>/<timestamp>`` with owner-only permissions.

        Raises:
            TempDirUnavailableError: if the directory already exists or cannot
                be created.
        """
        if not timestamp:
            raise TempDirUnavailableError("Workspace timestamp must not be empty")
        try:
            validate_no_traversal("", timestamp)
            root = validate_within_root(self._base_dir / timestamp, self._base_dir)
        except PathValidationError as exc:
            raise TempDirUnavailableError(f"Invalid workspace path: {exc}") from exc

        try:
            root.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TempDirUnavailableError(
                f"Could not create temporary directory {root}: {exc}"
            ) from exc

        try:
            root.mkdir(mode=WORKSPACE_MODE)
            root.chmod(WORKSPACE_MODE)
        except FileExistsError as exc:
            raise TempDirUnavailableError(
                f"Temporary directory {root} is already in use"
            ) from exc
        except OSError as exc:
            raise TempDirUnavailableError(
                f"Could not create temporary directory {root}: {exc}"
            ) from exc

        Log.debug("Workspace acquired", path=root)
        return Workspace(root_path=root, timestamp=timestamp)

    def release(self, workspace: Workspace) -> None:
        """Remove the workspace recursively. Failures are logged, never raised."""
        try:
            shutil.rmtree(workspace.root_path)
        except FileNotFoundError:
            return
        except OSError as exc:
            Log.warning(
                f"Failed to remove temp directory {workspace.root_path}: {exc}"
            )
            return
        Log.debug("Workspace released", path=workspace.root_path)

    @contextmanager
    def scoped(self, timestamp: str) -> Generator[Workspace, None, None]:
        workspace = self.acquire(timestamp)
        try:
            yield workspace
        finally:
            self.release(workspace)
