from collections.abc import Mapping

from app.analysis.base import BaseAnalyzer
from app.analysis.factory import AnalyzerFactory
from app.analysis.models import AnalysisResult
from app.config.settings import Settings
from app.encoding.base64_encoder import ChunkedBase64Encoder
from app.logging.logger import Log
from app.pdf.factory import PdfInspectorFactory
from app.submission.builder import SubmissionBuilder
from app.submission.models import Document


class Processor:
    """Orchestrates one upload-and-ask cycle.

    Pipeline: validate -> encode -> submit -> normalize.
    """

    def __init__(self, builder: SubmissionBuilder, analyzer: BaseAnalyzer) -> None:
        self._builder = builder
        self._analyzer = analyzer

    def process(self, question: str, documents: Mapping[str, Document]) -> AnalysisResult:
        """Run the analysis for one question over the uploaded documents.

        Raises:
            SubmissionValidationError: before any provider call, on bad input.
            EncodingError: if a document cannot be encoded.
        """
        Log.info(f"Processing question over {len(documents)} documents")
        request = self._builder.build(question, documents)
        return self._analyzer.submit(request)


def build_processor(settings: Settings) -> Processor:
    """Build a Processor with all required adapters.

    Raises:
        AnalysisConfigurationError: when the analysis provider is not configured.
    """
    builder = SubmissionBuilder(
        encoder=ChunkedBase64Encoder(settings.encoder_chunk_size_bytes),
        max_documents=settings.max_documents,
        max_file_size_bytes=settings.max_file_size_bytes,
        max_total_size_bytes=settings.max_total_size_bytes,
        allowed_mime_types=settings.allowed_mime_types,
        pdf_inspector=PdfInspectorFactory.create(settings),
    )
    analyzer = AnalyzerFactory.create(settings)
    return Processor(builder=builder, analyzer=analyzer)
