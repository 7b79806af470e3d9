import mimetypes

from starlette.datastructures import FormData, UploadFile

from app.logging.logger import Log
from app.processor.exceptions import UploadReadError
from app.processor.models import UploadBatch
from app.submission.exceptions import SubmissionValidationError
from app.submission.models import Document

FILE_FIELD_PREFIX = "file_"
GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream"})


def resolve_mime_type(filename: str, content_type: str | None) -> str:
    """Use the declared content type, falling back to a guess from the file name."""
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared not in GENERIC_MIME_TYPES:
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or declared or "application/octet-stream"


class FileLoader:
    """Reads the question and ``file_*`` parts of a multipart form.

    Each part is read up to one byte past the per-file limit, which is enough
    for the submission builder to reject it without holding the whole upload.
    """

    def __init__(self, max_file_size_bytes: int) -> None:
        self._read_limit = max_file_size_bytes + 1

    async def load(self, form: FormData) -> UploadBatch:
        """Collect documents in form order.

        Raises:
            UploadReadError: if a file part cannot be read.
            SubmissionValidationError: if two file parts share a field name.
        """
        batch = UploadBatch()
        question = form.get("question")
        if isinstance(question, str):
            batch.question = question
        for key, value in form.multi_items():
            if not key.startswith(FILE_FIELD_PREFIX) or not isinstance(value, UploadFile):
                continue
            if key in batch.documents:
                raise SubmissionValidationError(
                    "duplicate_document_field", f"Duplicate document field '{key}'"
                )
            batch.documents[key] = await self._read(key, value)
        Log.info("Read upload", documents=len(batch.documents), total_bytes=batch.total_bytes)
        return batch

    async def _read(self, key: str, upload: UploadFile) -> Document:
        name = upload.filename or key
        try:
            data = await upload.read(self._read_limit)
        except OSError as exc:
            raise UploadReadError(f"Failed to read upload '{name}': {exc}") from exc
        return Document(
            name=name,
            mime_type=resolve_mime_type(name, upload.content_type),
            data=data,
        )
