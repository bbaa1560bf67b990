from __future__ import annotations
from dotenv import load_dotenv, find_dotenv; load_dotenv(find_dotenv(usecwd=True), override=True)

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import DEFAULT_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HealthPi API
    HEALTHPI_URL: str = Field(
        default=DEFAULT_URL,
        description="Base URL of the HealthPi measurement API",
    )
    HEALTHPI_TIMEOUT: float = Field(default=30.0, description="HTTP timeout in seconds")

    # General
    LOG_LEVEL: str = Field(default="INFO")


def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
