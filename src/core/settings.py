"""Application settings loaded from the environment."""
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from calculator.common.types import AngleMode


class Settings(BaseSettings):
    """Settings for the evaluator and the HTTP service."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Evaluator
    DEFAULT_ANGLE_MODE: AngleMode = AngleMode.DEGREES
    MAX_NESTING_DEPTH: int = Field(default=100, ge=1)
    ANS_SIGNIFICANT_DIGITS: int = Field(default=12, ge=1, le=17)

    # Logging
    LOG_LEVEL: str = "INFO"
    ENV: str = "development"

    # Service
    MAX_SESSIONS: int = Field(default=1000, ge=1)
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    AUTH_SECRET: Optional[SecretStr] = None

    def is_dev(self) -> bool:
        return self.ENV == "development"


settings = Settings()
