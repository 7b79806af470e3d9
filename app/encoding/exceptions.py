class EncodingError(Exception):
    """Raised when a document cannot be converted to its text encoding."""
