from collections.abc import Sequence
from typing import Any

import httpx

from app.analysis.client_base import BaseAnalysisClient
from app.analysis.exceptions import AnalysisTransportError, EmptyReplyError
from app.analysis.gemini_files import GeminiFileUploader
from app.submission.models import EncodedDocument


class GeminiClientAdapter(BaseAnalysisClient):
    """Analysis client for the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str,
        upload_base_url: str,
        inline_limit_bytes: int,
        poll_interval_seconds: float,
        poll_max_attempts: int,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._inline_limit_bytes = inline_limit_bytes
        self._http = http_client if http_client is not None else httpx.Client(timeout=timeout_seconds)
        self._files = GeminiFileUploader(
            http_client=self._http,
            api_key=api_key,
            base_url=base_url,
            upload_base_url=upload_base_url,
            poll_interval_seconds=poll_interval_seconds,
            poll_max_attempts=poll_max_attempts,
        )

    def generate(
        self,
        *,
        model: str,
        temperature: float,
        documents: Sequence[EncodedDocument],
        instruction: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = json_schema  # carried in the instruction text
        parts = [self._document_part(doc) for doc in documents]
        parts.append({"text": instruction})
        body = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": temperature,
                "responseMimeType": "application/json",
            },
        }
        try:
            response = self._http.post(
                f"{self._base_url}/models/{model}:generateContent",
                headers={"x-goog-api-key": self._api_key},
                json=body,
            )
        except httpx.HTTPError as exc:
            raise AnalysisTransportError(f"AI provider network error: {exc}") from exc

        if response.is_error:
            raise AnalysisTransportError(
                f"AI provider API error {response.status_code}: {response.text[:500]}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise AnalysisTransportError(f"AI provider returned invalid JSON: {exc}") from exc

        text = self._extract_text(payload)
        if not text.strip():
            raise EmptyReplyError("AI returned empty response")
        return text

    def _document_part(self, document: EncodedDocument) -> dict[str, Any]:
        if len(document.data) > self._inline_limit_bytes:
            file_uri = self._files.upload(document)
            return {"file_data": {"mime_type": document.mime_type, "file_uri": file_uri}}
        return {"inline_data": {"mime_type": document.mime_type, "data": document.data}}

    @staticmethod
    def _extract_text(payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        candidates = payload.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        )
