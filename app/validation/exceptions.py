class PathValidationError(Exception):
    """Base exception for rejected path or timestamp inputs."""


class InvalidPathParametersError(PathValidationError):
    """Raised when a path or timestamp contains a parent-directory reference."""


class UnsafePathCharactersError(PathValidationError):
    """Raised when a path handed to an external process contains shell metacharacters."""


class PathEscapesRootError(PathValidationError):
    """Raised when a resolved path falls outside its configured root directory."""
