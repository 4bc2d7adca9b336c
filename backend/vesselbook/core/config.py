from typing import List
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Vesselbook"
    API_V1_STR: str = "/api/v1"

    # Comma separated list, or a JSON list
    BACKEND_CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
        description="Allowed CORS origins",
    )

    # Database
    DATABASE_URI: str = "sqlite:///./vesselbook.db"
    SEED_ON_STARTUP: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # Money defaults for vessels without settings
    DEFAULT_CURRENCY: str = "EUR"
    DEFAULT_HOUSE_OF_ZEROS: int = Field(default=2, ge=0, le=4)

    # Recurring transaction generation job
    RECURRING_ENABLED: bool = True
    RECURRING_HOUR: int = Field(default=2, ge=0, le=23)
    RECURRING_MINUTE: int = Field(default=0, ge=0, le=59)

    @field_validator("DEFAULT_CURRENCY", mode="before")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def cors_origins(self) -> List[str]:
        raw = self.BACKEND_CORS_ORIGINS.strip()
        if raw.startswith("["):
            raw = raw.strip("[]").replace('"', "").replace("'", "")
        return [i.strip() for i in raw.split(",") if i.strip()]

    @property
    def async_database_uri(self) -> str:
        return self.DATABASE_URI.replace("sqlite:///", "sqlite+aiosqlite:///")

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"Loaded settings: API_V1_STR={settings.API_V1_STR}, CORS={settings.cors_origins}")
