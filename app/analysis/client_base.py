from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.submission.models import EncodedDocument


class BaseAnalysisClient(ABC):
    """Contract for provider-specific document analysis clients."""

    @abstractmethod
    def generate(
        self,
        *,
        model: str,
        temperature: float,
        documents: Sequence[EncodedDocument],
        instruction: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return provider response as plain text.

        Raises:
            AnalysisTransportError: on network errors or non-success status.
            EmptyReplyError: when the provider returns no text.
        """
