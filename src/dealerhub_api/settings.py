"""Settings for the dealer admin API."""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the dealer admin API.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) reads
    configuration values from environment variables and, for local development, from a .env file.

    Environment variable names are case-insensitive (DATABASE_URL and database_url are equivalent).
    """

    environment: str = "local"
    """Deployment environment name, attached to startup logs."""

    # PostgreSQL domain database
    database_url: Optional[str] = None
    """PostgreSQL connection string. When unset the API starts but data routes answer 503."""

    db_pool_min_size: int = 1
    """Minimum number of pooled connections."""

    db_pool_max_size: int = 10
    """Maximum number of pooled connections."""

    db_command_timeout: float = 30.0
    """Per-query timeout in seconds."""

    # Logging
    log_level: str = "INFO"
    """Minimum level written to stdout."""

    # Sharing behaviour
    dedupe_contacts: bool = False
    """Remove repeated contacts when manual and partner contacts are combined (off keeps every entry)."""

    # Dashboard HTTP client
    api_base_url: str = "http://localhost:8000/api"
    """Base URL the dashboard client uses to reach this API."""

    api_timeout_seconds: float = 10.0
    """Timeout applied to every dashboard client request."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )
