"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/student_profiles.db")
    LLM_CONFIG_PATH: str = Field(default="app_config.json")

    HISTORY_LIMIT: int = Field(default=20, ge=1)
    NAME_SCAN_TURNS: int = Field(default=3, ge=0)

    ADMIN_PASSWORD: str = "admin123"
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
            "http://127.0.0.1:5173",
        ]
    )

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
