from typing import ClassVar

from app.analysis.analyzer import Analyzer
from app.analysis.base import BaseAnalyzer
from app.analysis.client_base import BaseAnalysisClient
from app.analysis.example_client_adapter import ExampleClientAdapter
from app.analysis.exceptions import AnalysisConfigurationError
from app.analysis.gemini_client_adapter import GeminiClientAdapter
from app.analysis.openai_client_adapter import OpenAIClientAdapter
from app.config.settings import Settings


class AnalyzerFactory:
    """Creates the configured analyzer adapter."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
    }

    PROVIDERS: ClassVar[tuple[str, ...]] = (
        "example",
        "gemini",
        "openai",
        "openai_compatible",
        "openrouter",
    )

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        """Create a configured analyzer from application settings.

        Raises:
            ValueError: for an unknown provider name.
            AnalysisConfigurationError: when the provider's API key, model or
                base URL is missing.
        """
        provider = settings.analysis_provider.lower()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown analysis provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if provider == "example":
            return Analyzer(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                local_conflict_check=settings.local_conflict_check,
            )
        return Analyzer(
            client=cls._create_client(provider, settings),
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.analysis_temperature,
            local_conflict_check=settings.local_conflict_check,
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseAnalysisClient:
        api_key = cls._resolve_api_key(provider, settings)
        if provider == "gemini":
            return GeminiClientAdapter(
                api_key=api_key,
                timeout_seconds=settings.gemini_timeout_seconds,
                base_url=settings.gemini_base_url,
                upload_base_url=settings.gemini_upload_base_url,
                inline_limit_bytes=settings.gemini_inline_limit_bytes,
                poll_interval_seconds=settings.gemini_file_poll_interval_seconds,
                poll_max_attempts=settings.gemini_file_poll_max_attempts,
            )
        return OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise AnalysisConfigurationError(
                    "openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return url
        return cls.OPENAI_COMPATIBLE_BASE_URLS[provider]

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "gemini": ("gemini_api_key", settings.gemini_api_key),
            "openai": ("openai_api_key", settings.openai_api_key),
            "openai_compatible": (
                "openai_compatible_api_key",
                settings.openai_compatible_api_key,
            ),
            "openrouter": ("openrouter_api_key", settings.openrouter_api_key),
        }
        setting_name, key = key_map[provider]
        if not key.strip():
            raise AnalysisConfigurationError(
                f"API key not configured: set {setting_name.upper()} "
                f"for analysis_provider={provider}"
            )
        return key.strip()

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "gemini": settings.gemini_model_name,
            "openai": settings.openai_model_name,
            "openai_compatible": settings.openai_compatible_model_name,
            "openrouter": settings.openrouter_model_name,
        }
        model = key_map[provider].strip()
        if not model:
            raise AnalysisConfigurationError(
                f"Model name not configured for analysis_provider={provider}"
            )
        return model
