from pathlib import Path

import pymupdf

from consolidator.pdf.base import BasePdfWriter
from consolidator.pdf.exceptions import PdfRenderError, PdfWriteError


class PyMuPdfAdapter(BasePdfWriter):
    """Builds image PDFs using PyMuPDF."""

    def __init__(self) -> None:
        super().__init__()
        self._doc = pymupdf.open()  # type: ignore[no-untyped-call]

    def add_image_page(self, image_path: Path, width: float, height: float) -> None:
        try:
            page = self._doc.new_page(width=width, height=height)
            page.insert_image(page.rect, filename=str(image_path))
        except Exception as exc:
            raise PdfRenderError(f"pymupdf could not draw {image_path}: {exc}") from exc
        self._page_count += 1

    def save(self, target: Path) -> None:
        try:
            self._doc.save(str(target), garbage=3, deflate=True)
        except Exception as exc:
            raise PdfWriteError(f"pymupdf could not write {target}: {exc}") from exc

    def close(self) -> None:
        self._doc.close()
