"""Chunked base64 encoding for uploaded documents.

Documents can be tens of megabytes. The buffer is walked in fixed-size
slices, each slice is encoded on its own and the encoded runs are joined
once at the end, so no step grows a string piece by piece.
"""

import base64
import binascii

from app.encoding.exceptions import EncodingError
from app.logging.logger import Log

DEFAULT_CHUNK_SIZE = 30 * 1024


class ChunkedBase64Encoder:
    """Encodes byte buffers of arbitrary size into base64 text."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        # Every chunk except the last must be a whole number of 3-byte groups,
        # otherwise the per-chunk encodings would carry padding mid-stream.
        if chunk_size <= 0 or chunk_size % 3 != 0:
            raise ValueError(
                f"chunk_size must be a positive multiple of 3, got {chunk_size}"
            )
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def encode(self, data: bytes) -> str:
        """Return the base64 text of ``data``.

        Raises:
            EncodingError: if any chunk cannot be converted.
        """
        try:
            view = memoryview(data).cast("B")
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"Cannot encode object of type {type(data).__name__}") from exc

        runs: list[str] = []
        with view:
            total = len(view)
            for offset in range(0, total, self._chunk_size):
                runs.append(self._encode_chunk(view[offset:offset + self._chunk_size], offset))

        encoded = "".join(runs)
        Log.event("document.encoded", bytes=total, chunks=len(runs), chars=len(encoded))
        return encoded

    @staticmethod
    def decode(text: str) -> bytes:
        """Decode base64 text produced by :meth:`encode`."""
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise EncodingError(f"Invalid base64 text: {exc}") from exc

    @staticmethod
    def _encode_chunk(chunk: memoryview, offset: int) -> str:
        try:
            return base64.b64encode(chunk).decode("ascii")
        except (TypeError, ValueError, MemoryError) as exc:
            raise EncodingError(f"Failed to encode chunk at offset {offset}: {exc}") from exc
