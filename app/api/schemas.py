"""Wire schemas for the analysis API (camelCase, as the UI expects)."""

from pydantic import BaseModel, ConfigDict, Field

from app.analysis.models import AnalysisResult, Confidence


class AnswerResponse(BaseModel):
    value: str
    source: str
    page: int | None = None
    quote: str | None = None
    confidence: Confidence


class ErrorResponse(BaseModel):
    code: str
    message: str


class AnalysisResultResponse(BaseModel):
    """AnalysisResult as returned by ``POST /api/analyze``."""

    model_config = ConfigDict(populate_by_name=True)

    question: str
    answers: list[AnswerResponse]
    has_conflict: bool = Field(alias="hasConflict")
    explanation: str
    recommendation: str
    timestamp: int
    error: ErrorResponse | None = None

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultResponse":
        return cls(
            question=result.question,
            answers=[
                AnswerResponse(
                    value=a.value,
                    source=a.source,
                    page=a.page,
                    quote=a.quote,
                    confidence=a.confidence,
                )
                for a in result.answers
            ],
            has_conflict=result.has_conflict,
            explanation=result.explanation,
            recommendation=result.recommendation,
            timestamp=result.timestamp,
            error=(
                ErrorResponse(code=result.error.code, message=result.error.message)
                if result.error is not None
                else None
            ),
        )


class HealthResponse(BaseModel):
    status: str
    provider: str
    configured: bool
