"""Core configuration - centralized config for the giftwrap package.

All environment-based configuration should flow through this module.

Usage:
    from giftwrap.core.config import get_config
    config = get_config()

    window = config.timestamp_tweak_seconds
    log_level = config.log_level
"""

from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigException

# Upper bound (seconds) of the random offset subtracted from an envelope's
# created_at. Two days, matching the gift wrap convention.
RANGE_RANDOM_TIMESTAMP_TWEAK = 172800


class CoreSettings(BaseSettings):
    """Core configuration settings for giftwrap.

    Settings can be configured via environment variables with the
    ``GIFTWRAP_`` prefix or a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # PROTOCOL SETTINGS
    # ==========================================================================

    timestamp_tweak_seconds: int = Field(
        default=RANGE_RANDOM_TIMESTAMP_TWEAK,
        gt=0,
        description="Decorrelation window for envelope timestamps (seconds)",
        validation_alias="GIFTWRAP_TIMESTAMP_TWEAK",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="GIFTWRAP_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="GIFTWRAP_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="GIFTWRAP_LOG_FILE",
    )


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.

    Raises:
        ConfigException: If the environment holds an unusable value.
    """
    global _config
    if _config is None:
        try:
            _config = CoreSettings()
        except ValidationError as e:
            errors = e.errors()
            setting = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else None
            raise ConfigException(f"Invalid giftwrap configuration: {e}", setting=setting) from e
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
