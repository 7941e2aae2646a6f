"""Pure checks run on caller-influenced paths before any I/O or process call."""

import os
from pathlib import Path

from app.validation.exceptions import (
    InvalidPathParametersError,
    PathEscapesRootError,
    UnsafePathCharactersError,
)

SHELL_METACHARACTERS: tuple[str, ...] = (
    ";", "&", "|", "$", "`", "(", ")", "{", "}", "[", "]", "*", "?", "<", ">", "~",
)

SUPPORTED_VIDEO_EXTENSIONS: tuple[str, ...] = (
    "mp4", "avi", "mov", "mkv", "wmv", "flv", "webm",
)


def validate_no_traversal(path: str, timestamp: str) -> None:
    """Reject a path or timestamp containing ``..``.

    Raises:
        InvalidPathParametersError: if either value contains ``..``.
    """
    if ".." in path or ".." in timestamp:
        raise InvalidPathParametersError("Invalid path parameters")


def validate_no_shell_metacharacters(*paths: str) -> None:
    """Reject any path containing a shell metacharacter.

    Raises:
        UnsafePathCharactersError: on the first offending path.
    """
    for path in paths:
        for char in SHELL_METACHARACTERS:
            if char in path:
                raise UnsafePathCharactersError(
                    f"Invalid characters in file path: {char!r}"
                )


def validate_within_root(candidate: str | Path, root: str | Path) -> Path:
    """Resolve ``candidate`` and ``root`` to absolute form and check containment.

    Returns:
        The absolute, normalised candidate path.

    Raises:
        PathEscapesRootError: unless the candidate is the root or a descendant.
    """
    root_abs = os.path.abspath(root)
    candidate_abs = os.path.abspath(candidate)
    if candidate_abs != root_abs and not candidate_abs.startswith(
        os.path.join(root_abs, "")
    ):
        raise PathEscapesRootError(f"Path {candidate} escapes root {root}")
    return Path(candidate_abs)


def video_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lstrip(".").lower()


def is_supported_video(filename: str) -> bool:
    """Match on file extension only, case-insensitively."""
    return video_extension(filename) in SUPPORTED_VIDEO_EXTENSIONS
