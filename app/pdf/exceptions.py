class PdfInspectionError(Exception):
    """Raised when PDF bytes cannot be opened as a document."""
