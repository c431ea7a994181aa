"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Engine limits are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from automation.core.constants import (
    DEFAULT_EXECUTION_TIMEOUT_SECONDS,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_RECURSION_DEPTH,
    DEFAULT_MAX_WORKFLOWS_PER_TRIGGER,
    DEFAULT_SANDBOX_START_METHOD,
    SANDBOX_START_METHODS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults. The workflow_* limits bound the work an
    admin-authored logic tree can cause on the triggering request path.
    """

    # App
    app_name: str = "workflow-automation"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite:///...)
    database_url: str = ""
    database_echo: bool = False

    # Workflow engine
    workflow_execution_timeout_seconds: float = DEFAULT_EXECUTION_TIMEOUT_SECONDS
    workflow_max_recursion_depth: int = DEFAULT_MAX_RECURSION_DEPTH
    workflow_max_per_trigger: int = DEFAULT_MAX_WORKFLOWS_PER_TRIGGER
    workflow_max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    # multiprocessing start method for the evaluation sandbox
    workflow_sandbox_start_method: str = DEFAULT_SANDBOX_START_METHOD

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "none"
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_workflow_limits(self) -> "Settings":
        """Validate engine limits and sandbox start method."""
        if self.workflow_execution_timeout_seconds <= 0:
            raise ValueError("WORKFLOW_EXECUTION_TIMEOUT_SECONDS must be positive")
        if self.workflow_max_recursion_depth < 1:
            raise ValueError("WORKFLOW_MAX_RECURSION_DEPTH must be at least 1")
        if self.workflow_max_per_trigger < 1:
            raise ValueError("WORKFLOW_MAX_PER_TRIGGER must be at least 1")
        if self.workflow_max_concurrency < 1:
            raise ValueError("WORKFLOW_MAX_CONCURRENCY must be at least 1")
        if self.workflow_sandbox_start_method not in SANDBOX_START_METHODS:
            raise ValueError(
                f"workflow_sandbox_start_method must be one of {SANDBOX_START_METHODS}, "
                f"got: {self.workflow_sandbox_start_method!r}"
            )
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
