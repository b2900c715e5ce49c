"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files. Read once at startup and
never mutated afterwards.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Provider selection. Names must match registered providers.
    vision_provider: str = "openai"
    analysis_provider: str = "openai"
    # Registration order, which is also the fallback order for alternatives
    enabled_providers: list[str] = ["openai", "gemini", "ollama"]

    # OpenAI
    openai_api_key: SecretStr = SecretStr("")
    openai_base_url: str = "https://api.openai.com/v1"
    openai_vision_model: str = "gpt-4o"
    openai_analysis_model: str = "gpt-4o-mini"

    # Gemini
    gemini_api_key: SecretStr = SecretStr("")
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_vision_model: str = "gemini-2.0-flash"
    gemini_analysis_model: str = "gemini-2.0-flash"

    # Ollama
    ollama_url: str = "http://localhost:11434"
    ollama_vision_model: str = "llama3.2-vision"
    ollama_analysis_model: str = "llama3.2"

    # Call policy shared by every provider
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.2
    llm_timeout_seconds: float = 120.0
    llm_max_retry_attempts: int = 2
    llm_retry_delay_seconds: float = 2.0

    # Pipeline
    max_concurrent_pages: int = 4
    pdf_render_dpi: int = 150

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for CLI and API entry points."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
