from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType


class BasePdfWriter(ABC):
    """Contract for adapters that lay out image pages into a single PDF.

    One writer instance builds one document: pages are appended in call
    order, then the document is saved once.
    """

    def __init__(self) -> None:
        self._page_count = 0

    @property
    def page_count(self) -> int:
        """Number of pages drawn so far."""
        return self._page_count

    @abstractmethod
    def add_image_page(self, image_path: Path, width: float, height: float) -> None:
        """Append a page of the given size with the image drawn to fill it.

        Raises:
            PdfRenderError: if the image cannot be drawn.
        """

    @abstractmethod
    def save(self, target: Path) -> None:
        """Persist the document to target.

        Raises:
            PdfWriteError: if the document cannot be written.
        """

    def close(self) -> None:
        """Release resources held by the underlying library."""

    def __enter__(self) -> "BasePdfWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
