from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"
    ocr_language: str = "eng"
    tesseract_cmd: str | None = None
    extraction_timeout_seconds: int = 120

    llm_provider: str = "openai"
    llm_api_key: str = ""
    llm_base_url: str | None = None
    llm_model_name: str = "gpt-3.5-turbo"
    llm_timeout_seconds: int = 30
    embedding_model_name: str = "text-embedding-3-small"

    extraction_max_tokens: int = 1500
    extraction_max_attempts: int = 1
    summary_temperature: float = 0.3
    summary_max_tokens: int = 150
    classification_strict_labels: bool = True
    classification_fallback_label: str | None = "other"

    search_default_limit: int = 5
