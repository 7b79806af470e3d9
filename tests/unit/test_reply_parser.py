"""Tests for provider reply parsing and field defaults."""

import json

import pytest

from app.analysis.exceptions import MalformedReplyError
from app.analysis.reply_parser import UNKNOWN_SOURCE, parse_reply, strip_code_fences


def _answer(**overrides: object) -> dict[str, object]:
    answer: dict[str, object] = {
        "value": "$196.63 billion",
        "source": "2023.pdf",
        "page": 4,
        "quote": "The market was valued at $196.63 billion.",
        "confidence": "High",
    }
    answer.update(overrides)
    return answer


def _reply(answers: list[object], **fields: object) -> str:
    return json.dumps({"answers": answers, **fields})


class TestStripCodeFences:
    def test_strips_json_fence(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_plain_fence(self) -> None:
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leaves_unfenced_text(self) -> None:
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestParseAnswers:
    def test_parses_answer_fields(self) -> None:
        reply = parse_reply(_reply([_answer()], hasConflict=False, explanation="", recommendation=""))
        answer = reply.answers[0]
        assert answer.value == "$196.63 billion"
        assert answer.source == "2023.pdf"
        assert answer.page == 4
        assert answer.quote == "The market was valued at $196.63 billion."
        assert answer.confidence == "High"
        assert reply.legacy is False

    def test_parses_fenced_reply(self) -> None:
        reply = parse_reply("```json\n" + _reply([_answer()]) + "\n```")
        assert len(reply.answers) == 1

    @pytest.mark.parametrize(
        ("raw_page", "expected"),
        [(3, 3), ("7", 7), (2.0, 2), (0, None), (-1, None), ("n/a", None), (True, None), (None, None)],
    )
    def test_page_defaults_when_not_a_positive_integer(
        self, raw_page: object, expected: int | None
    ) -> None:
        reply = parse_reply(_reply([_answer(page=raw_page)]))
        assert reply.answers[0].page == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("High", "High"), ("low", "Low"), (" MEDIUM ", "Medium"), ("sure", "Medium"), (None, "Medium")],
    )
    def test_confidence_is_normalized(self, raw: object, expected: str) -> None:
        reply = parse_reply(_reply([_answer(confidence=raw)]))
        assert reply.answers[0].confidence == expected

    def test_missing_fields_get_defaults(self) -> None:
        reply = parse_reply(_reply([{}]))
        answer = reply.answers[0]
        assert answer.value == ""
        assert answer.source == UNKNOWN_SOURCE
        assert answer.page is None
        assert answer.quote is None

    def test_numeric_value_is_stringified(self) -> None:
        reply = parse_reply(_reply([_answer(value=305.9)]))
        assert reply.answers[0].value == "305.9"

    def test_skips_non_object_answers(self) -> None:
        reply = parse_reply(_reply(["oops", _answer(), 42]))
        assert len(reply.answers) == 1

    def test_non_list_answers_become_empty(self) -> None:
        reply = parse_reply(json.dumps({"answers": "none"}))
        assert reply.answers == []

    def test_context_is_used_when_quote_missing(self) -> None:
        item = _answer(quote=None, context="Page 2: revenue grew")
        reply = parse_reply(_reply([item]))
        assert reply.answers[0].quote == "Page 2: revenue grew"


class TestLegacyShape:
    def test_maps_conflicts_context_to_quote(self) -> None:
        raw = json.dumps({
            "conflicts": [
                {"value": "$20B", "source": "A", "context": "Page 12: TAM", "confidence": "Low"},
            ],
            "explanation": "Different scope",
            "recommendation": "Trust A",
        })
        reply = parse_reply(raw)
        assert reply.legacy is True
        assert reply.answers[0].quote == "Page 12: TAM"
        assert reply.answers[0].confidence == "Low"
        assert reply.has_conflict is None

    def test_answers_take_precedence_over_conflicts(self) -> None:
        raw = json.dumps({"answers": [_answer()], "conflicts": [_answer(), _answer()]})
        reply = parse_reply(raw)
        assert reply.legacy is False
        assert len(reply.answers) == 1


class TestTopLevelFields:
    def test_reads_conflict_flag_and_commentary(self) -> None:
        reply = parse_reply(_reply([], hasConflict=True, explanation=" why ", recommendation="trust B"))
        assert reply.has_conflict is True
        assert reply.explanation == "why"
        assert reply.recommendation == "trust B"

    def test_non_boolean_conflict_flag_is_ignored(self) -> None:
        reply = parse_reply(_reply([], hasConflict="yes"))
        assert reply.has_conflict is None

    def test_blank_commentary_is_missing(self) -> None:
        reply = parse_reply(_reply([], explanation="   ", recommendation=None))
        assert reply.explanation is None
        assert reply.recommendation is None


class TestMalformedReplies:
    def test_invalid_json_raises_with_raw_text(self) -> None:
        with pytest.raises(MalformedReplyError, match="Invalid JSON") as exc_info:
            parse_reply("not json")
        assert exc_info.value.raw_text == "not json"

    def test_json_array_raises_error(self) -> None:
        with pytest.raises(MalformedReplyError, match="must be an object"):
            parse_reply("[]")

    def test_raw_text_is_fence_stripped(self) -> None:
        with pytest.raises(MalformedReplyError) as exc_info:
            parse_reply("```\nThe values differ.\n```")
        assert exc_info.value.raw_text == "The values differ."
