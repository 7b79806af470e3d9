from dataclasses import dataclass, field

from app.submission.models import Document


@dataclass
class UploadBatch:
    """Question and documents read from one multipart submission."""

    question: str = ""
    documents: dict[str, Document] = field(default_factory=dict)

    @property
    def total_bytes(self) -> int:
        return sum(doc.size for doc in self.documents.values())
