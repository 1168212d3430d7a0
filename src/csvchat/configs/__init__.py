"""Application configuration."""

from .config import (  # noqa: F401
    AppConfig,
    ConfigError,
    MissingAPIKeyError,
    get_app_config,
    validate_startup_config,
)
