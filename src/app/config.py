from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.app.domain.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    NOTION_API_KEY: str = ""
    NOTION_RECIPES_DB_ID: str = ""
    NOTION_WEBSITES_DB_ID: str = ""
    NOTION_API_URL: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT_SECONDS: float = Field(default=20.0, ge=1.0, le=120.0)

    UPSERT_CHUNK_SIZE: int = Field(default=5, ge=1)
    UPSERT_PACING_SECONDS: float = Field(default=1.0, ge=0.0)

    KEYWORD_CONTEXTS_PATH: Optional[str] = None

    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "https://recipe-automation-dashboard.netlify.app"],
    )

    def missing_notion_keys(self) -> list[str]:
        required = {
            "NOTION_API_KEY": self.NOTION_API_KEY,
            "NOTION_RECIPES_DB_ID": self.NOTION_RECIPES_DB_ID,
            "NOTION_WEBSITES_DB_ID": self.NOTION_WEBSITES_DB_ID,
        }
        return [name for name, value in required.items() if not value]

    def require_notion(self) -> None:
        missing = self.missing_notion_keys()
        if missing:
            raise ConfigurationError(missing)


settings = Settings()
