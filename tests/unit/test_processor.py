from unittest.mock import MagicMock, patch

import pytest

from app.analysis.analyzer import Analyzer
from app.analysis.exceptions import AnalysisConfigurationError
from app.analysis.models import AnalysisResult
from app.config.settings import Settings
from app.processor.processor import Processor, build_processor
from app.submission.builder import SubmissionBuilder
from app.submission.exceptions import SubmissionValidationError
from app.submission.models import AnalysisRequest, Document


def _documents() -> dict[str, Document]:
    return {"file_0": Document(name="a.txt", mime_type="text/plain", data=b"Revenue $5M")}


class TestProcess:
    def test_builds_then_submits(self) -> None:
        builder = MagicMock(spec=SubmissionBuilder)
        analyzer = MagicMock()
        request = AnalysisRequest(question="Revenue?", documents=(), instruction="i")
        expected = AnalysisResult(question="Revenue?")
        builder.build.return_value = request
        analyzer.submit.return_value = expected

        result = Processor(builder=builder, analyzer=analyzer).process("Revenue?", _documents())

        builder.build.assert_called_once_with("Revenue?", _documents())
        analyzer.submit.assert_called_once_with(request)
        assert result is expected

    def test_validation_error_skips_provider(self) -> None:
        builder = MagicMock(spec=SubmissionBuilder)
        analyzer = MagicMock()
        builder.build.side_effect = SubmissionValidationError("empty_question", "empty")

        with pytest.raises(SubmissionValidationError):
            Processor(builder=builder, analyzer=analyzer).process("", _documents())
        analyzer.submit.assert_not_called()


class TestBuildProcessor:
    def test_builds_with_example_provider(self) -> None:
        processor = build_processor(Settings(analysis_provider="example", pdf_engine="none"))
        result = processor.process("Revenue?", _documents())
        assert result.answers[0].source == "a.txt"
        assert result.error is None

    def test_passes_limits_to_builder(self) -> None:
        settings = Settings(
            analysis_provider="example",
            pdf_engine="none",
            max_documents=2,
            max_file_size_bytes=10,
            max_total_size_bytes=15,
        )
        with patch("app.processor.processor.SubmissionBuilder") as mock_builder:
            build_processor(settings)
        kwargs = mock_builder.call_args.kwargs
        assert kwargs["max_documents"] == 2
        assert kwargs["max_file_size_bytes"] == 10
        assert kwargs["max_total_size_bytes"] == 15
        assert kwargs["pdf_inspector"] is None

    def test_uses_analyzer_from_factory(self) -> None:
        processor = build_processor(Settings(analysis_provider="example", pdf_engine="none"))
        assert isinstance(processor._analyzer, Analyzer)

    def test_raises_when_provider_not_configured(self) -> None:
        with pytest.raises(AnalysisConfigurationError):
            build_processor(Settings(analysis_provider="gemini", gemini_api_key=""))
