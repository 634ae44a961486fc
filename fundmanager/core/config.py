"""
Application configuration module.

Loads settings from environment variables (or .env file) using pydantic-settings.
The only setting the screen truly depends on is the backend root URL; the rest
tune logging.
"""

import os

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed path segment every backend route lives under.
FUND_API_PATH = "/fundapi"

# Project root: two levels above ``fundmanager/core``.
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    Central configuration for the Fund Manager client.

    Read once at import time.  Values come from the process environment or
    a ``.env`` file next to where the server is started.
    """

    PROJECT_NAME: str = "Mutual Fund Management App"
    VERSION: str = "1.0.0"

    # ── Fund backend ──
    # Root of the REST backend, e.g. ``http://localhost:8080``.
    FUND_API_URL: str = "http://localhost:8080"

    # ── Logging ──
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = os.path.join(_PROJECT_ROOT, "logs")
    LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_FILE_BACKUP_COUNT: int = 5

    @field_validator("FUND_API_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @model_validator(mode="after")
    def _require_http_backend(self) -> "Settings":
        """Fail fast on a backend root that httpx could never reach."""
        if not self.FUND_API_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"FUND_API_URL must be an http:// or https:// URL, "
                f"got {self.FUND_API_URL!r}.\n\n"
                f"Set it in a .env file in the project root:\n"
                f"       FUND_API_URL=http://localhost:8080\n\n"
                f"or export it before starting the server:\n"
                f"       FUND_API_URL=http://localhost:8080 uvicorn fundmanager.main:app"
            )
        return self

    @property
    def FUND_API_BASE_URL(self) -> str:
        """Backend root plus the fixed ``/fundapi`` segment."""
        return f"{self.FUND_API_URL}{FUND_API_PATH}"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
