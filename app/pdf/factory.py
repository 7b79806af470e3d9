from app.config.settings import Settings
from app.pdf.base import BasePdfInspector
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfInspectorFactory:
    """Creates the PDF inspector selected in settings, or None when disabled."""

    ADAPTERS: dict[str, type[BasePdfInspector]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfInspector | None:
        engine = settings.pdf_engine.lower()
        if engine == "none":
            return None
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {[*cls.ADAPTERS, 'none']}"
            )
        return adapter_cls()
