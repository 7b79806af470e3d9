import base64
from collections.abc import Sequence
from typing import Any

import httpx
import openai

from app.analysis.client_base import BaseAnalysisClient
from app.analysis.exceptions import AnalysisTransportError, EmptyReplyError
from app.submission.models import EncodedDocument


class OpenAIClientAdapter(BaseAnalysisClient):
    """Analysis client adapter built on OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
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
        content = [self._document_part(doc) for doc in documents]
        content.append({"type": "text", "text": instruction})
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "analysis_result",
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[{"role": "user", "content": content}],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisTransportError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise AnalysisTransportError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise EmptyReplyError("AI returned no choices")
        text = response.choices[0].message.content
        if not text:
            raise EmptyReplyError("AI returned empty response")
        return text

    @staticmethod
    def _document_part(document: EncodedDocument) -> dict[str, Any]:
        if document.mime_type.startswith("text/"):
            text = base64.b64decode(document.data).decode("utf-8", errors="replace")
            return {"type": "text", "text": f"Document: {document.name}\n\n{text}"}
        return {
            "type": "file",
            "file": {
                "filename": document.name,
                "file_data": f"data:{document.mime_type};base64,{document.data}",
            },
        }
