"""Centralized configuration loaded from environment variables."""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    app_host: str = Field("0.0.0.0", alias="APP_HOST")
    app_port: int = Field(8000, alias="APP_PORT")
    database_path: str = Field("./data/database.json", alias="DATABASE_PATH")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Empty disables the dashboard check (local development only)
    dashboard_password: str = Field("", alias="DASHBOARD_PASSWORD")

    default_discovery_count: int = Field(25, alias="DEFAULT_DISCOVERY_COUNT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
