import io
from pathlib import Path

from reportlab.pdfgen import canvas

from consolidator.pdf.base import BasePdfWriter
from consolidator.pdf.exceptions import PdfRenderError, PdfWriteError


class ReportLabAdapter(BasePdfWriter):
    """Builds image PDFs using the ReportLab canvas."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer)

    def add_image_page(self, image_path: Path, width: float, height: float) -> None:
        try:
            self._canvas.setPageSize((width, height))
            self._canvas.drawImage(str(image_path), 0, 0, width=width, height=height)
            self._canvas.showPage()
        except Exception as exc:
            raise PdfRenderError(f"reportlab could not draw {image_path}: {exc}") from exc
        self._page_count += 1

    def save(self, target: Path) -> None:
        try:
            self._canvas.save()
            target.write_bytes(self._buffer.getvalue())
        except Exception as exc:
            raise PdfWriteError(f"reportlab could not write {target}: {exc}") from exc

    def close(self) -> None:
        self._buffer.close()
