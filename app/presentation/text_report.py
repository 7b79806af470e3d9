"""Plain-text rendering of an analysis result."""

from datetime import datetime, timezone

from app.analysis.models import AnalysisResult, Answer

CONFLICT_BANNER = "CONFLICT DETECTED"
CONSISTENT_BANNER = "VALUES CONSISTENT"
NO_QUOTE = "No quote available"


def render_text_report(result: AnalysisResult) -> str:
    """Render the downloadable text report for one result.

    Explanation and recommendation sections are only included when the
    answers conflict; empty sections are skipped.
    """
    lines = [
        "CLASH ANALYSIS",
        "==============",
        f"Date: {_format_date(result.timestamp)}",
        "",
        f"Q: {result.question}",
        "",
        "ANSWERS FROM SOURCES",
        "--------------------",
    ]
    if result.answers:
        for answer in result.answers:
            lines.extend(_answer_lines(answer))
            lines.append("")
    else:
        lines.extend(["No answers were extracted.", ""])

    lines.append(CONFLICT_BANNER if result.has_conflict else CONSISTENT_BANNER)

    if result.has_conflict:
        _append_section(lines, "WHY THEY DIFFER", result.explanation)
        _append_section(lines, "RECOMMENDATION", result.recommendation, prefix="-> ")
    elif result.error is not None:
        _append_section(lines, "NOTE", result.explanation)
    return "\n".join(lines).strip() + "\n"


def _answer_lines(answer: Answer) -> list[str]:
    page = f" (page {answer.page})" if answer.page else ""
    return [
        f"{answer.value}  <-  {answer.source}{page}  [{answer.confidence}]",
        f'   "{answer.quote or NO_QUOTE}"',
    ]


def _append_section(lines: list[str], title: str, body: str, prefix: str = "") -> None:
    if not body:
        return
    lines.extend(["", title, "-" * len(title), f"{prefix}{body}"])


def _format_date(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")
