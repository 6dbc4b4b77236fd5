"""
Configuration module for the Attribute Enrichment service.

This module uses Pydantic Settings to load and validate environment variables
for the HTTP client used to reach external origins, the location of the
filter configuration, service authentication and logging.

Environment variables are loaded from .env file or system environment.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import FetchContext


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting has a default so the filter can be used as a library
    without any environment at all.
    """

    # =========================================================================
    # Filter Configuration
    # =========================================================================

    ENRICHMENT_CONFIG_FILE: Optional[Path] = Field(
        None,
        description="JSON file with the filter configuration (attribute name -> origin)",
    )

    # =========================================================================
    # HTTP Client Configuration
    # =========================================================================

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Total timeout for a request to an external origin",
        gt=0,
        le=120,
    )

    HTTP_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="Connect timeout for a request to an external origin",
        gt=0,
        le=60,
    )

    HTTP_VERIFY_TLS: bool = Field(
        default=True,
        description="Verify TLS certificates of external origins",
    )

    HTTP_USER_AGENT: str = Field(
        default="attribute-enrichment/1.0",
        description="User-Agent header sent to external origins",
        min_length=1,
    )

    # =========================================================================
    # Service Configuration
    # =========================================================================

    INTERNAL_SHARED_SECRET: Optional[str] = Field(
        None,
        description="Shared secret required in X-Internal-Secret on /process (if set)",
        min_length=32,
    )

    SERVICE_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the enrichment service",
    )

    SERVICE_PORT: int = Field(
        default=8090,
        description="Port to bind the enrichment service",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level",
    )

    # =========================================================================
    # Pydantic Settings Configuration
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    def fetch_context(self) -> FetchContext:
        """
        Build the default HTTP fetch context from these settings.

        Returns:
            FetchContext forwarded to the HTTP client on every fetch.
        """
        return FetchContext(
            headers={
                "User-Agent": self.HTTP_USER_AGENT,
                "Accept": "application/json",
            },
            timeout=self.HTTP_TIMEOUT_SECONDS,
            connect_timeout=self.HTTP_CONNECT_TIMEOUT_SECONDS,
            verify=self.HTTP_VERIFY_TLS,
        )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate the logging level name.

        Raises:
            ValueError: If the level is not a standard logging level
        """
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

        level = v.strip().upper()
        if level not in allowed_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {allowed_levels}, got: {v}"
            )

        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If an environment variable is invalid.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def load_filter_config(path: Path) -> Dict[str, Any]:
    """
    Read the filter configuration from a JSON file.

    The file holds a single object mapping attribute names to origins,
    exactly as it would be passed to ExternalAttributeFilter.

    Args:
        path: Path to the JSON file

    Returns:
        The decoded configuration mapping

    Raises:
        ConfigurationError: If the file cannot be read or is not a JSON object
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read filter configuration {str(path)!r}: {e}") from e

    try:
        config = json.loads(raw)
    except ValueError as e:
        raise ConfigurationError(f"Filter configuration {str(path)!r} is not valid JSON: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError("config should be an array")

    return config
