"""
Scanner configuration.

Centralises environment variable names and default values for the
HTTP server, the rate limiter and the browser session. Uses
``pydantic_settings.BaseSettings`` for environment variable binding
and type coercion.
"""

from __future__ import annotations

import functools

import pydantic
import pydantic_settings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class ScannerSettings(pydantic_settings.BaseSettings):
    """Runtime settings loaded from the environment.

    Attributes:
        host: Interface the API server binds to.
        port: Port the API server listens on.
        environment: ``production`` enables static client serving
            and disables auto-reload.
        scan_rate_limit: Scans allowed per client per window.
        scan_rate_window_seconds: Length of the rate-limit window.
        headless: Run Chromium without a visible window.
        user_agent: Desktop user agent presented to scanned sites.
    """

    model_config = pydantic_settings.SettingsConfigDict(populate_by_name=True, extra="ignore")

    host: str = pydantic.Field(default="0.0.0.0", validation_alias="UVICORN_HOST")
    port: int = pydantic.Field(default=3001, validation_alias="UVICORN_PORT")
    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")
    scan_rate_limit: int = pydantic.Field(default=10, ge=1, validation_alias="SCAN_RATE_LIMIT")
    scan_rate_window_seconds: float = pydantic.Field(default=60.0, gt=0, validation_alias="SCAN_RATE_WINDOW_SECONDS")
    headless: bool = pydantic.Field(default=True, validation_alias="BROWSER_HEADLESS")
    user_agent: str = pydantic.Field(default=DEFAULT_USER_AGENT, validation_alias="SCANNER_USER_AGENT")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@functools.lru_cache(maxsize=1)
def get_settings() -> ScannerSettings:
    """Return the process-wide settings (read once, then cached)."""
    return ScannerSettings()
