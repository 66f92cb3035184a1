"""
Configuration module for the LifeDesk API.
Loads settings from environment variables.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Database (use relative path or set via environment variable)
    database_url: str = "sqlite:///./lifedesk.db"

    # Logging
    log_level: str = "INFO"

    # LLM Configuration
    llm_provider: str = "ollama"
    llm_base_url: str = "http://localhost:11434"
    llm_model: str = "llama3.1:latest"
    llm_timeout_seconds: float = 60.0

    # Nutrition cascade: ask the LLM for foods missing from the catalog
    food_lookup_enabled: bool = True

    # Voice pipeline heuristics
    default_currency: str = "USD"
    food_purchase_description_max_length: int = 30
    fallback_max_transcript_length: int = 80

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
