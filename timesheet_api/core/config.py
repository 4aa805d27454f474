import os
import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Timesheet API"
    database_url: str = Field(
        default=f"sqlite:///{(BASE_DIR / 'timesheet.db').as_posix()}",
        description="Database connection string",
    )
    cors_origins: list[AnyHttpUrl] = []
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    # Uploaded invoices and payment evidence. The default lives in the system
    # temp dir and does not survive a host restart.
    document_dir: Path = Field(default=Path(tempfile.gettempdir()) / "timesheet-documents")

    session_ttl_hours: int = 720
    auth_callback_secret: str | None = Field(
        default=None, description="Shared secret the identity provider sends on sign-in"
    )

    jira_url: str | None = None
    jira_email: str = "admin@example.com"
    jira_api_token: str | None = None
    jira_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_prefix="TIMESHEET_", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[AnyHttpUrl]) -> list[AnyHttpUrl]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("TIMESHEET_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()
