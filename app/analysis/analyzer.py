"""AI-powered document comparison."""

from collections.abc import Callable
from pathlib import Path

from app.analysis.base import BaseAnalyzer
from app.analysis.client_base import BaseAnalysisClient
from app.analysis.conflict_check import values_conflict
from app.analysis.exceptions import AnalysisTransportError, EmptyReplyError, MalformedReplyError
from app.analysis.models import AnalysisResult, epoch_millis
from app.analysis.reply_parser import ParsedReply, parse_reply
from app.logging.logger import Log
from app.submission.models import AnalysisRequest
from app.submission.prompt_loader import load_json_schema

CONSISTENT_EXPLANATION = "All sources report consistent values."
CONSISTENT_RECOMMENDATION = "The sources agree; any of them can be used."
NO_ANSWERS_EXPLANATION = "No values relevant to the question were found in the documents."
MISSING_EXPLANATION = "Could not generate explanation."
MISSING_RECOMMENDATION = "No recommendation available."
UNPARSED_RECOMMENDATION = "Could not parse structured response"


class Analyzer(BaseAnalyzer):
    """Sends encoded documents to an AI provider and normalizes the reply."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        temperature: float = 0.1,
        local_conflict_check: bool = True,
        json_schema_path: Path | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._local_conflict_check = local_conflict_check
        self._json_schema = load_json_schema(json_schema_path)
        self._clock = clock

    def submit(self, request: AnalysisRequest) -> AnalysisResult:
        """Run one analysis. Never raises for provider-side failures."""
        Log.debug(f"Analysis instruction:\n{request.instruction}")
        Log.event(
            "analysis.submit",
            model=self._model,
            documents=len(request.documents),
            encoded_chars=sum(len(doc.data) for doc in request.documents),
        )

        try:
            raw_response = self._client.generate(
                model=self._model,
                temperature=self._temperature,
                documents=request.documents,
                instruction=request.instruction,
                json_schema=self._json_schema,
            )
        except AnalysisTransportError as exc:
            Log.error(f"Analysis provider call failed: {exc}")
            return AnalysisResult.degraded(
                request.question,
                code="transport_error",
                explanation=f"The analysis service request failed: {exc}",
                timestamp=self._clock(),
            )
        except EmptyReplyError as exc:
            Log.error(f"Analysis provider returned no text: {exc}")
            return AnalysisResult.degraded(
                request.question,
                code="transport_error",
                explanation="The analysis service returned no response.",
                timestamp=self._clock(),
            )
        Log.debug(f"AI raw response:\n{raw_response}")

        try:
            reply = parse_reply(raw_response)
        except MalformedReplyError as exc:
            Log.warning(f"Could not parse analysis reply: {exc}")
            return AnalysisResult.degraded(
                request.question,
                code="malformed_reply",
                explanation=exc.raw_text,
                recommendation=UNPARSED_RECOMMENDATION,
                message=str(exc),
                timestamp=self._clock(),
            )

        result = self._build_result(request.question, reply)
        Log.info("Analysis complete", answers=len(result.answers), conflict=result.has_conflict)
        return result

    def _build_result(self, question: str, reply: ParsedReply) -> AnalysisResult:
        has_conflict = self._resolve_conflict(reply)
        if has_conflict:
            explanation = reply.explanation or MISSING_EXPLANATION
            recommendation = reply.recommendation or MISSING_RECOMMENDATION
        else:
            default = CONSISTENT_EXPLANATION if reply.answers else NO_ANSWERS_EXPLANATION
            explanation = reply.explanation or default
            recommendation = reply.recommendation or CONSISTENT_RECOMMENDATION
        return AnalysisResult(
            question=question,
            answers=reply.answers,
            has_conflict=has_conflict,
            explanation=explanation,
            recommendation=recommendation,
            timestamp=self._clock(),
        )

    def _resolve_conflict(self, reply: ParsedReply) -> bool:
        if reply.has_conflict is not None:
            return reply.has_conflict
        if reply.legacy:
            return len(reply.answers) > 1
        values = [answer.value for answer in reply.answers]
        if self._local_conflict_check:
            verdict = values_conflict(values)
            if verdict is not None:
                Log.debug(f"Local conflict check decided conflict={verdict}")
                return verdict
        distinct = {" ".join(value.casefold().split()) for value in values}
        return len(distinct) > 1
