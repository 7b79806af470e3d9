import io

import pdfplumber

from app.pdf.base import BasePdfInspector
from app.pdf.exceptions import PdfInspectionError


class PdfPlumberAdapter(BasePdfInspector):
    """Inspects PDF documents using pdfplumber."""

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfInspectionError(f"pdfplumber could not open document: {exc}") from exc
