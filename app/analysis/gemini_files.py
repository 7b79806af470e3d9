"""Upload of large documents to the Gemini file store.

Uploaded files are processed asynchronously on the provider side and can only
be referenced once they reach the ACTIVE state, so the uploader polls the file
status a bounded number of times.
"""

import base64
import time
from collections.abc import Callable
from typing import Any

import httpx

from app.analysis.exceptions import AnalysisTransportError
from app.logging.logger import Log
from app.submission.models import EncodedDocument

ACTIVE = "ACTIVE"
FAILED = "FAILED"


class GeminiFileUploader:
    """Uploads documents with the resumable protocol and waits for processing."""

    def __init__(
        self,
        *,
        http_client: httpx.Client,
        api_key: str,
        base_url: str,
        upload_base_url: str,
        poll_interval_seconds: float,
        poll_max_attempts: int,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._upload_base_url = upload_base_url.rstrip("/")
        self._poll_interval_seconds = poll_interval_seconds
        self._poll_max_attempts = poll_max_attempts
        self._sleep = sleep

    def upload(self, document: EncodedDocument) -> str:
        """Upload a document and return its file URI once it is ACTIVE.

        Raises:
            AnalysisTransportError: on network errors, non-success status,
                a FAILED file or when processing outlasts the poll budget.
        """
        raw = base64.b64decode(document.data)
        upload_url = self._start_upload(document, len(raw))
        file_info = self._send_bytes(upload_url, raw)
        Log.info(f"Uploaded '{document.name}' to file store as {file_info.get('name')}")
        file_info = self._wait_until_active(file_info)
        uri = file_info.get("uri")
        if not isinstance(uri, str) or not uri:
            raise AnalysisTransportError(f"File store returned no URI for '{document.name}'")
        return uri

    def _start_upload(self, document: EncodedDocument, size: int) -> str:
        response = self._request(
            "POST",
            f"{self._upload_base_url}/files",
            headers={
                "X-Goog-Upload-Protocol": "resumable",
                "X-Goog-Upload-Command": "start",
                "X-Goog-Upload-Header-Content-Length": str(size),
                "X-Goog-Upload-Header-Content-Type": document.mime_type,
            },
            json={"file": {"display_name": document.name}},
        )
        upload_url = response.headers.get("x-goog-upload-url")
        if not upload_url:
            raise AnalysisTransportError("File store did not return an upload URL")
        return upload_url

    def _send_bytes(self, upload_url: str, raw: bytes) -> dict[str, Any]:
        response = self._request(
            "POST",
            upload_url,
            headers={
                "X-Goog-Upload-Offset": "0",
                "X-Goog-Upload-Command": "upload, finalize",
            },
            content=raw,
        )
        payload = self._json(response)
        return self._file_info(payload.get("file") if isinstance(payload, dict) else None)

    def _wait_until_active(self, file_info: dict[str, Any]) -> dict[str, Any]:
        name = file_info.get("name", "")
        attempts = 0
        while file_info.get("state") != ACTIVE:
            if file_info.get("state") == FAILED:
                raise AnalysisTransportError(f"File store failed to process {name}")
            if attempts >= self._poll_max_attempts:
                raise AnalysisTransportError(
                    f"File {name} still processing after {attempts} status checks"
                )
            Log.debug(f"File {name} is {file_info.get('state')}, waiting")
            self._sleep(self._poll_interval_seconds)
            response = self._request("GET", f"{self._base_url}/{name}")
            file_info = self._file_info(self._json(response))
            attempts += 1
        return file_info

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {"x-goog-api-key": self._api_key, **kwargs.pop("headers", {})}
        try:
            response = self._http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise AnalysisTransportError(f"File store network error: {exc}") from exc
        if response.is_error:
            raise AnalysisTransportError(
                f"File store error {response.status_code}: {response.text[:500]}"
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise AnalysisTransportError(f"File store returned invalid JSON: {exc}") from exc

    @staticmethod
    def _file_info(raw: Any) -> dict[str, Any]:
        if not isinstance(raw, dict) or not raw.get("name"):
            raise AnalysisTransportError("File store returned an unexpected file description")
        return raw
