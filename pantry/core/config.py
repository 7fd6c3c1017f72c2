from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev, prod or test
    ENV: Literal["dev", "prod", "test"] = "dev"

    # Storage
    DATABASE_URL: str = "sqlite:///./pantry.db"
    CREATE_TABLES: bool = True  # create missing tables before the first write

    # Source
    CSV_PATH: str = "food.csv"
    CSV_ENCODING: str = "utf-8"

    # Normalization
    TWO_DIGIT_YEAR_PIVOT: int = Field(default=50, ge=0, le=100)  # YY < pivot -> 20YY, else 19YY

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    SLACK_WEBHOOK_URL: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="PANTRY_",
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL


settings = Settings()
