from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "finintake"
    db_username: str = "finintake"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    max_event_attempts: int = 3
    event_poll_interval_seconds: int = 5
    dispatcher_max_pending: int = 20

    document_rate_limit_per_minute: int = 5
    audio_rate_limit_per_minute: int = 2
    rate_limit_period_seconds: int = 60

    pdf_engine: str = "pdfplumber"

    extraction_provider: str = "openai"
    extraction_api_key: str = ""
    extraction_model_name: str = "gpt-4o-mini"
    extraction_audio_model_name: str = "gpt-4o-audio-preview"
    extraction_base_url: str = ""
    extraction_timeout_seconds: int = 60
    extraction_temperature: float = 0.0
