from dataclasses import dataclass


@dataclass(frozen=True)
class Document:
    """An uploaded document as read from the request."""

    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class EncodedDocument:
    """A document converted to base64 text for transport."""

    name: str
    mime_type: str
    data: str


@dataclass(frozen=True)
class AnalysisRequest:
    """Question, encoded documents and instruction sent to the analysis provider."""

    question: str
    documents: tuple[EncodedDocument, ...]
    instruction: str

    @property
    def document_names(self) -> list[str]:
        return [doc.name for doc in self.documents]
