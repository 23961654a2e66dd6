class AssemblyError(Exception):
    """Base exception for composite document assembly."""


class EmptyImageSetError(AssemblyError):
    """Raised when an image-set directory holds no qualifying images."""


class NoReadableImagesError(EmptyImageSetError):
    """Raised when every qualifying image in a set is damaged."""

    def __init__(self, message: str, damaged_images: tuple[str, ...]) -> None:
        super().__init__(message)
        self.damaged_images = damaged_images


class ImageSetUnreadableError(AssemblyError):
    """Raised when an image-set directory cannot be listed."""


class StorageError(AssemblyError):
    """Raised when the storage folder for a document cannot be created."""


class ImageDrawError(AssemblyError):
    """Raised when a probed image cannot be drawn onto its page."""


class DocumentWriteError(AssemblyError):
    """Raised when the assembled document cannot be persisted or re-read."""
