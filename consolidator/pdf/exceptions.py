class PdfError(Exception):
    """Base exception for PDF writer adapters."""


class PdfRenderError(PdfError):
    """Raised when an image cannot be drawn onto a page."""


class PdfWriteError(PdfError):
    """Raised when the assembled document cannot be persisted."""
