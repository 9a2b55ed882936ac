"""
Application settings, loaded from environment variables and the .env file.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini API (Developer API key or Vertex AI)
    google_api_key: str = ""
    use_vertex_ai: bool = False
    vertex_project_id: str = ""
    vertex_location: str = "us-central1"
    image_model_name: str = "gemini-2.5-flash-image"

    # Retry policy for each generation call
    retry_max_attempts: int = 3
    retry_initial_delay: float = 2.0
    retry_backoff_multiplier: float = 2.0

    # Variations per scene generation
    output_count: int = 4

    # Generation history
    history_db_path: str = "history.db"
    history_limit: int = 20

    # Logging / tracing
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    tracing_enabled: bool = False

    @field_validator("retry_max_attempts", "output_count", "history_limit")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()
