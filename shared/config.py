"""Shared configuration for the API, generator and client."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"

    # Output Configuration
    output_dir: str = "output"

    # Generation Limits
    max_articles_per_keyword: int = 10
    article_min_words: int = 900
    article_max_words: int = 1000

    # Gemini Configuration
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash-exp"

    # Groq Configuration
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    groq_temperature: float = 0.7
    groq_max_tokens: int = 2048

    provider_timeout: int = 120  # seconds

    # Retention
    job_retention_seconds: int = 86400  # 0 keeps jobs forever
    retention_sweep_interval: float = 300.0

    # Client Configuration
    api_base_url: str = "http://localhost:8000"
    poll_interval: float = 1.0

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
