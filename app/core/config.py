"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase (empty URL means the store is not configured)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    VACATIONS_TABLE: str = "vacations"

    # Extraction oracle (OpenAI-compatible chat completions)
    LLM_BASE_URL: str = "https://api.deepseek.com"
    LLM_MODEL: str = "deepseek-chat"
    LLM_API_KEY: str = ""
    LLM_TIMEOUT_SECONDS: float = 30.0
    LLM_MAX_TOKENS: int = 200

    # Year assumed when a message does not name one
    VACATION_DEFAULT_YEAR: int = 2026

    # Reversed ranges are rejected unless this is enabled
    SWAP_REVERSED_RANGES: bool = False

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()
