class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class UploadReadError(ProcessorError):
    """Raised when an uploaded file part cannot be read."""
