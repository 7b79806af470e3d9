"""Turns provider reply text into answers and commentary.

Provider output is not guaranteed to follow the requested schema, so missing
or mistyped answer fields fall back to defaults instead of failing. Only a
reply that is not a JSON object at all is rejected.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from app.analysis.exceptions import MalformedReplyError
from app.analysis.models import CONFIDENCE_LEVELS, Answer, Confidence
from app.logging.logger import Log

UNKNOWN_SOURCE = "Unknown source"
DEFAULT_CONFIDENCE: Confidence = "Medium"


@dataclass(frozen=True)
class ParsedReply:
    """Reply fields as found in the provider output, before defaults."""

    answers: list[Answer] = field(default_factory=list)
    has_conflict: bool | None = None
    explanation: str | None = None
    recommendation: str | None = None
    legacy: bool = False


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```)."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    return cleaned


def parse_reply(raw: str) -> ParsedReply:
    """Parse provider reply text.

    Accepts both the current ``answers`` shape and the older flat
    ``conflicts`` list, whose ``context`` field maps to ``quote``.

    Raises:
        MalformedReplyError: if the text is not a JSON object.
    """
    cleaned = strip_code_fences(raw)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedReplyError(f"Invalid JSON response: {exc}", cleaned) from exc
    if not isinstance(parsed, dict):
        raise MalformedReplyError("JSON response must be an object", cleaned)

    legacy = "answers" not in parsed and "conflicts" in parsed
    raw_answers = parsed.get("conflicts") if legacy else parsed.get("answers")
    return ParsedReply(
        answers=_build_answers(raw_answers, legacy=legacy),
        has_conflict=_optional_bool(parsed.get("hasConflict")),
        explanation=_optional_text(parsed.get("explanation")),
        recommendation=_optional_text(parsed.get("recommendation")),
        legacy=legacy,
    )


def _build_answers(raw: Any, *, legacy: bool) -> list[Answer]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        Log.warning(f"Ignoring answers of type {type(raw).__name__}, expected a list")
        return []
    answers: list[Answer] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            Log.warning(f"Skipping answer at index {index}: expected an object")
            continue
        answers.append(_build_answer(item, legacy=legacy))
    return answers


def _build_answer(raw: dict[str, Any], *, legacy: bool) -> Answer:
    quote_key = "context" if legacy else "quote"
    quote = _optional_text(raw.get(quote_key))
    if quote is None and not legacy:
        quote = _optional_text(raw.get("context"))
    return Answer(
        value=_value_text(raw.get("value")),
        source=_optional_text(raw.get("source")) or UNKNOWN_SOURCE,
        confidence=_confidence(raw.get("confidence")),
        page=_page(raw.get("page")),
        quote=quote,
    )


def _value_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, (int, float)):
        return str(raw)
    return json.dumps(raw)


def _optional_text(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    return text or None


def _optional_bool(raw: Any) -> bool | None:
    return raw if isinstance(raw, bool) else None


def _page(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str) and raw.strip().isdigit():
        raw = int(raw.strip())
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if isinstance(raw, int) and raw >= 1:
        return raw
    return None


def _confidence(raw: Any) -> Confidence:
    if isinstance(raw, str):
        wanted = raw.strip().lower()
        for level in CONFIDENCE_LEVELS:
            if level.lower() == wanted:
                return level
    return DEFAULT_CONFIDENCE
