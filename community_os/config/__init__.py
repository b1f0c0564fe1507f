"""Configuration management module for the community directory."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_app_config
from .models import (
    AdvancedConfig,
    AppConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingSettings,
    OpenAISettings,
    SearchSettings,
)

__all__ = [
    # Loader functions
    "load_config",
    "parse_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SearchSettings",
    "MatchingSettings",
    "OpenAISettings",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
