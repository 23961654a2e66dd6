class ProcessorError(Exception):
    """Base exception for all case-processing errors."""


class CaseDetailNotFoundError(ProcessorError):
    """Raised when a case has no row in the case-detail table."""


class MissingImageSetError(ProcessorError):
    """Raised when a case needs assembly but has no image-set reference."""


class DisposalError(ProcessorError):
    """Raised when source images cannot be moved or deleted."""


class OutcomeUpdateError(ProcessorError):
    """Raised when the success outcome cannot be stored.

    Severe when source images were already relocated: the filesystem is then
    ahead of the store.
    """

    def __init__(self, message: str, severe: bool = False) -> None:
        super().__init__(message)
        self.severe = severe
