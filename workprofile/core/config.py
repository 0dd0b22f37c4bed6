"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Drivers accepted by create_async_engine for the relational store.
_ASYNC_DRIVER_PREFIXES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional. database_url is only required by code paths
    that open a session (see persistence.database._ensure_engine).
    """

    # App
    app_name: str = "workprofile"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Snapshots: reason used when a snapshot is created with a blank reason.
    snapshot_default_reason_template: str = "Check-in finalization for {display_name}"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_service_name: str = "workprofile"
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_database_and_templates(self) -> "Settings":
        """Validate the database driver and the snapshot reason template.

        - DATABASE_URL, when set, must use an async driver.
        - SNAPSHOT_DEFAULT_REASON_TEMPLATE must contain {display_name}.
        """
        if self.database_url and not self.database_url.startswith(_ASYNC_DRIVER_PREFIXES):
            raise ValueError(
                "DATABASE_URL must use an async driver "
                f"({', '.join(_ASYNC_DRIVER_PREFIXES)}), got: {self.database_url.split('://')[0]!r}"
            )
        if "{display_name}" not in self.snapshot_default_reason_template:
            raise ValueError(
                "SNAPSHOT_DEFAULT_REASON_TEMPLATE must contain the {display_name} placeholder."
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
