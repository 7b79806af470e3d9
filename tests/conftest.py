import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def render_pdf(*pages: str) -> bytes:
    """Render one PDF page per string, each with a single line of text."""
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=A4)
    for text in pages:
        pdf.drawString(72, 770, text)
        pdf.showPage()
    pdf.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """2023 market report, one page."""
    return render_pdf("The market size was $196.63 billion in 2023.")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """2024 market report, the figure on page two."""
    return render_pdf("Industry overview", "The market size is $305.90 billion in 2024.")
