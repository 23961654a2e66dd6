from consolidator.config.settings import Settings
from consolidator.pdf.base import BasePdfWriter
from consolidator.pdf.pymupdf_adapter import PyMuPdfAdapter
from consolidator.pdf.reportlab_adapter import ReportLabAdapter


class PdfWriterFactory:
    """Selects the PDF writer adapter named in settings."""

    ADAPTERS: dict[str, type[BasePdfWriter]] = {
        "pymupdf": PyMuPdfAdapter,
        "reportlab": ReportLabAdapter,
    }

    @classmethod
    def resolve(cls, settings: Settings) -> type[BasePdfWriter]:
        """Return the adapter class; each call of it starts a new document."""
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls
