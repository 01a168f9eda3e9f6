"""
RIK — Application Configuration
================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
       `ApiSettings` is the smaller object handed to the home manager and
       the API builders; it is derived from `Settings` at boot.
Who:   Imported by the boot sequence (rik.main) and the logging setup.
When:  Loaded once at module import time; re-read by create_app() in tests.

Design Decision:
    The API version mode is kept as a plain string here (not a Literal).
    An unsupported mode must surface as a boot error raised by the boot
    sequence, with the offending value in the message, rather than as a
    pydantic error at import time.
"""

from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field, field_validator


DEFAULT_PORT = 58080


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development; only
    RIK_HOME usually needs to be set.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)

    # What: Controls verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── RIK Home ──────────────────────────────────────────────────────────
    # What: Root directory holding the version folders (v1/, v2/, ...)
    rik_home: str = Field(default="./rik-home")

    # ── API Versioning ────────────────────────────────────────────────────
    # path:   /api/v1/widgets
    # header: /api/widgets  +  "api-version: v1"
    api_version_mode: str = Field(default="path")
    api_version_header: str = Field(default="api-version")

    @field_validator("api_version_mode")
    @classmethod
    def normalize_api_version_mode(cls, v: str) -> str:
        return v.strip().lower()

    # What: URL prefix under which the generated API is mounted
    api_prefix: str = Field(default="/api")

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Prefix must start with '/' and must not end with one."""
        v = "/" + v.strip("/")
        return "" if v == "/" else v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
    }


class ApiVersionSettings(BaseModel):
    """How the version of a request is selected."""
    mode: str = Field(default="path", description="path or header")
    header: str = Field(default="api-version", description="Header read in header mode")


class ApiSettings(BaseModel):
    """
    What:  The settings object consumed by the home manager and API builders.
    Why:   Keeps the builders independent from environment parsing; tests build
           one directly without touching env vars.
    """
    api_version: ApiVersionSettings = Field(default_factory=ApiVersionSettings)

    @classmethod
    def from_settings(cls, source: Settings) -> "ApiSettings":
        return cls(
            api_version=ApiVersionSettings(
                mode=source.api_version_mode,
                header=source.api_version_header,
            )
        )


# Singleton instance, imported by the boot sequence
settings = Settings()
