from abc import ABC, abstractmethod

from app.analysis.models import AnalysisResult
from app.submission.models import AnalysisRequest


class BaseAnalyzer(ABC):
    """Contract for all analyzers."""

    @abstractmethod
    def submit(self, request: AnalysisRequest) -> AnalysisResult:
        """Send an analysis request and normalize the reply.

        Args:
            request: Question, encoded documents and instruction text.

        Returns:
            AnalysisResult. Provider failures and malformed replies produce a
            degraded result instead of an exception.
        """
