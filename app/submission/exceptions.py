class SubmissionError(Exception):
    """Raised when an analysis request cannot be assembled."""


class SubmissionValidationError(SubmissionError):
    """Raised when the uploaded documents or question break an input constraint.

    ``constraint`` names the breached rule so callers can report it without
    parsing the message.
    """

    def __init__(self, constraint: str, message: str) -> None:
        super().__init__(message)
        self.constraint = constraint
