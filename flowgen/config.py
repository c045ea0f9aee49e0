from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration read from the environment and `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    # "mock", "openai" or "gemini"
    ia_provider: str = "mock"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    ia_timeout_seconds: float = 120.0

    generation_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    generation_max_tokens: int = 3000
    validation_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    validation_max_tokens: int = 1000

    # "memory" or "sqlite"; both are process-local
    storage_backend: str = "memory"
    database_url: str = "sqlite://"

    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]
    recent_cache_path: str = ".flowgen/recent_workflows.json"


settings = Settings()  # reads from env
