import pytest
from pydantic import ValidationError

from app.config.settings import MIB, Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_analysis_provider(self) -> None:
        s = Settings()
        assert s.analysis_provider == "gemini"

    def test_default_temperature_is_low(self) -> None:
        s = Settings()
        assert s.analysis_temperature == 0.1

    def test_default_limits(self) -> None:
        s = Settings()
        assert s.max_documents == 5
        assert s.max_file_size_bytes == 30 * MIB
        assert s.max_total_size_bytes == 50 * MIB

    def test_default_allowed_mime_types(self) -> None:
        s = Settings()
        assert s.allowed_mime_types == ["application/pdf", "text/plain"]

    def test_default_encoder_chunk_size_is_multiple_of_three(self) -> None:
        s = Settings()
        assert s.encoder_chunk_size_bytes % 3 == 0

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_gemini_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        s = Settings()
        assert s.gemini_api_key == "secret"

    def test_loads_max_documents(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_DOCUMENTS", "3")
        s = Settings()
        assert s.max_documents == 3

    def test_loads_allowed_mime_types_as_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOWED_MIME_TYPES", '["application/pdf"]')
        s = Settings()
        assert s.allowed_mime_types == ["application/pdf"]

    def test_loads_local_conflict_check(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOCAL_CONFLICT_CHECK", "false")
        s = Settings()
        assert s.local_conflict_check is False


class TestAllowedOrigins:
    def test_splits_comma_separated_origins(self) -> None:
        s = Settings(allowed_origins="http://a.test, http://b.test,")
        assert s.get_allowed_origins() == ["http://a.test", "http://b.test"]

    def test_default_allows_any_origin(self) -> None:
        assert Settings().get_allowed_origins() == ["*"]


class TestSettingsValidation:
    def test_invalid_max_documents_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_DOCUMENTS", "five")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_temperature_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANALYSIS_TEMPERATURE", "warm")
        with pytest.raises(ValidationError):
            Settings()
