class RecorderError(Exception):
    """Base exception for archival bookkeeping."""


class CleanupError(RecorderError):
    """Raised when a previous artifact of a case cannot be removed."""
