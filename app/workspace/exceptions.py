class TempDirUnavailableError(Exception):
    """Raised when a job's workspace directory cannot be created."""
