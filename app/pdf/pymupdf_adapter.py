import pymupdf

from app.pdf.base import BasePdfInspector
from app.pdf.exceptions import PdfInspectionError


class PyMuPdfAdapter(BasePdfInspector):
    """Inspects PDF documents using PyMuPDF."""

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return doc.page_count
        except Exception as exc:
            raise PdfInspectionError(f"pymupdf could not open document: {exc}") from exc
