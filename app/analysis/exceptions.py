class AnalysisError(Exception):
    """Raised when document analysis fails."""


class AnalysisConfigurationError(AnalysisError):
    """Raised when the analysis provider is missing required configuration."""


class AnalysisTransportError(AnalysisError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class EmptyReplyError(AnalysisError):
    """Raised when the provider answers successfully but with no text."""


class MalformedReplyError(AnalysisError):
    """Raised when the provider reply is not a structured JSON object."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text
