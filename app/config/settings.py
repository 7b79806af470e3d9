from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"

    analysis_provider: str = "gemini"
    analysis_temperature: float = 0.1

    gemini_api_key: str = ""
    gemini_model_name: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_upload_base_url: str = "https://generativelanguage.googleapis.com/upload/v1beta"
    gemini_timeout_seconds: int = 120
    gemini_inline_limit_bytes: int = 15 * MIB
    gemini_file_poll_interval_seconds: float = 2.0
    gemini_file_poll_max_attempts: int = 15

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 120

    openai_compatible_api_key: str = ""
    openai_compatible_model_name: str = ""
    openai_compatible_base_url: str = ""

    openrouter_api_key: str = ""
    openrouter_model_name: str = "google/gemini-2.5-flash"

    max_documents: int = 5
    max_file_size_bytes: int = 30 * MIB
    max_total_size_bytes: int = 50 * MIB
    allowed_mime_types: list[str] = ["application/pdf", "text/plain"]

    encoder_chunk_size_bytes: int = 30 * 1024

    pdf_engine: str = "pdfplumber"

    local_conflict_check: bool = True

    def get_allowed_origins(self) -> list[str]:
        """Parse ALLOWED_ORIGINS string into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
