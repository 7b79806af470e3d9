"""Assembles uploaded documents and a question into an analysis request."""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from app.encoding.base64_encoder import ChunkedBase64Encoder
from app.logging.logger import Log
from app.pdf.base import BasePdfInspector
from app.pdf.exceptions import PdfInspectionError
from app.submission.exceptions import SubmissionValidationError
from app.submission.models import AnalysisRequest, Document, EncodedDocument
from app.submission.prompt_loader import load_json_schema, load_prompt_template

PDF_MIME_TYPE = "application/pdf"


class SubmissionBuilder:
    """Validates uploads, encodes each document once and renders the instruction."""

    def __init__(
        self,
        *,
        encoder: ChunkedBase64Encoder,
        max_documents: int,
        max_file_size_bytes: int,
        max_total_size_bytes: int,
        allowed_mime_types: Iterable[str],
        pdf_inspector: BasePdfInspector | None = None,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
    ) -> None:
        self._encoder = encoder
        self._max_documents = max_documents
        self._max_file_size_bytes = max_file_size_bytes
        self._max_total_size_bytes = max_total_size_bytes
        self._allowed_mime_types = frozenset(m.lower() for m in allowed_mime_types)
        self._pdf_inspector = pdf_inspector
        self._prompt_template = load_prompt_template(prompt_template_path)
        # Re-serialized so the instruction text does not depend on file formatting.
        self._json_schema = json.dumps(load_json_schema(json_schema_path), indent=2)

    def build(self, question: str, documents: Mapping[str, Document]) -> AnalysisRequest:
        """Validate inputs and produce an AnalysisRequest.

        Documents keep the caller's insertion order.

        Raises:
            SubmissionValidationError: on any breached input constraint.
            EncodingError: if a document cannot be encoded.
        """
        question = (question or "").strip()
        ordered = list(documents.values())
        self._validate(question, ordered)
        self._inspect_pdfs(ordered)

        encoded = tuple(self._encode(doc) for doc in ordered)
        instruction = self.render_instruction(question, [doc.name for doc in ordered])
        Log.info(
            "Built analysis request",
            documents=len(encoded),
            total_bytes=sum(doc.size for doc in ordered),
        )
        return AnalysisRequest(question=question, documents=encoded, instruction=instruction)

    def render_instruction(self, question: str, document_names: list[str]) -> str:
        names = "\n".join(f"{i}. {name}" for i, name in enumerate(document_names, start=1))
        return self._prompt_template.format(
            question=question,
            document_names=names,
            json_schema=self._json_schema,
        )

    def _validate(self, question: str, documents: list[Document]) -> None:
        if not question:
            raise SubmissionValidationError("empty_question", "Question must not be empty")
        if not documents:
            raise SubmissionValidationError("no_documents", "At least one document is required")
        if len(documents) > self._max_documents:
            raise SubmissionValidationError(
                "too_many_documents",
                f"Too many documents: {len(documents)} (max {self._max_documents})",
            )
        for doc in documents:
            if doc.mime_type.lower() not in self._allowed_mime_types:
                raise SubmissionValidationError(
                    "unsupported_media_type",
                    f"Unsupported media type '{doc.mime_type}' for '{doc.name}'. "
                    f"Allowed: {sorted(self._allowed_mime_types)}",
                )
            if doc.size > self._max_file_size_bytes:
                raise SubmissionValidationError(
                    "file_too_large",
                    f"File too large: '{doc.name}' exceeds the per-file limit of "
                    f"{self._max_file_size_bytes} bytes",
                )
        total = sum(doc.size for doc in documents)
        if total > self._max_total_size_bytes:
            raise SubmissionValidationError(
                "total_too_large",
                f"Total size {total} bytes exceeds limit of {self._max_total_size_bytes}",
            )

    def _inspect_pdfs(self, documents: list[Document]) -> None:
        if self._pdf_inspector is None:
            return
        for doc in documents:
            if doc.mime_type.lower() != PDF_MIME_TYPE:
                continue
            try:
                pages = self._pdf_inspector.page_count(doc.data)
            except PdfInspectionError as exc:
                raise SubmissionValidationError(
                    "unreadable_pdf", f"Document '{doc.name}' is not a readable PDF"
                ) from exc
            Log.debug(f"Document '{doc.name}' has {pages} pages")

    def _encode(self, doc: Document) -> EncodedDocument:
        return EncodedDocument(
            name=doc.name,
            mime_type=doc.mime_type.lower(),
            data=self._encoder.encode(doc.data),
        )
