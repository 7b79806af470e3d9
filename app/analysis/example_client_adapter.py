"""Example analysis client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseAnalysisClient and register the provider in AnalyzerFactory.
"""

import json
from collections.abc import Sequence
from typing import ClassVar

from app.analysis.client_base import BaseAnalysisClient
from app.submission.models import EncodedDocument


class ExampleClientAdapter(BaseAnalysisClient):
    """Example adapter that answers "n/a" for every document.

    No network calls. Useful for local development of the UI and as a
    template for building real provider adapters.
    """

    PLACEHOLDER_VALUE: ClassVar[str] = "n/a"

    def generate(
        self,
        *,
        model: str,
        temperature: float,
        documents: Sequence[EncodedDocument],
        instruction: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, instruction, json_schema
        return json.dumps({
            "answers": [
                {
                    "value": self.PLACEHOLDER_VALUE,
                    "source": doc.name,
                    "page": None,
                    "quote": None,
                    "confidence": "Low",
                }
                for doc in documents
            ],
            "hasConflict": False,
            "explanation": "",
            "recommendation": "",
        })
