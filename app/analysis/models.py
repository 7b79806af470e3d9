import time
from dataclasses import dataclass, field
from typing import Literal

Confidence = Literal["High", "Medium", "Low"]

CONFIDENCE_LEVELS: tuple[Confidence, ...] = ("High", "Medium", "Low")


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Answer:
    """One document's extracted value relevant to the question."""

    value: str
    source: str
    confidence: Confidence = "Medium"
    page: int | None = None
    quote: str | None = None


@dataclass(frozen=True)
class AnalysisFailure:
    """Machine-readable reason attached to a degraded result."""

    code: str
    message: str


@dataclass(frozen=True)
class AnalysisResult:
    """Answers, conflict verdict and commentary for one question."""

    question: str
    answers: list[Answer] = field(default_factory=list)
    has_conflict: bool = False
    explanation: str = ""
    recommendation: str = ""
    timestamp: int = 0
    error: AnalysisFailure | None = None

    @classmethod
    def degraded(
        cls,
        question: str,
        *,
        code: str,
        explanation: str,
        timestamp: int,
        recommendation: str = "",
        message: str | None = None,
    ) -> "AnalysisResult":
        """Build a renderable result for a request that produced no answers."""
        return cls(
            question=question,
            answers=[],
            has_conflict=False,
            explanation=explanation,
            recommendation=recommendation,
            timestamp=timestamp,
            error=AnalysisFailure(code=code, message=message or explanation),
        )
