"""Configuration loader for the community directory."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import GENERAL_SECTION, ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from YAML and environment variables.

    Config file resolution:
    1. Use config_path if given (must exist)
    2. Try config.yaml, then ./config/config.yaml
    3. Fall back to built-in defaults when neither exists

    Environment model overrides (OPENAI_EMBEDDING_MODEL, OPENAI_LLM_MODEL) are
    applied on top of the YAML values.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid or an explicit file is missing
    """
    config_file = _find_config_file(config_path)

    if config_file is None:
        config_dict: Dict[str, Any] = {}
    else:
        config_dict = _read_yaml(config_file)

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    app_config = parse_app_config(config_dict, source=str(config_file) if config_file else None)

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load environment configuration: {e}",
            source="environment",
            suggestions=["Copy .env.example to .env and fill in your values"],
        )

    if env_config.embedding_model:
        app_config.openai.embedding_model = env_config.embedding_model
    if env_config.llm_model:
        app_config.openai.llm_model = env_config.llm_model

    return app_config, env_config


def parse_app_config(config_dict: Dict[str, Any], source: Optional[str] = None) -> AppConfig:
    """Validate a raw mapping into AppConfig, translating pydantic errors.

    Args:
        config_dict: Parsed YAML mapping
        source: Where the mapping came from, shown in error messages

    Raises:
        ConfigurationError: With one readable line per invalid field
    """
    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        section_errors: Dict[str, List[str]] = {}
        for error in e.errors():
            loc = error["loc"]
            field_path = " -> ".join(str(part) for part in loc)
            error_type = error["type"]
            problems = section_errors.setdefault(str(loc[0]) if loc else GENERAL_SECTION, [])

            if error_type == "missing":
                problems.append(f"Missing required field: {field_path}")
            elif error_type in ("string_type", "int_type", "float_type", "bool_type"):
                expected_type = error_type.replace("_type", "")
                problems.append(
                    f"Invalid type for '{field_path}': expected {expected_type}, got {error.get('input')}"
                )
            elif "enum" in error_type:
                problems.append(f"Invalid value for '{field_path}': {error['msg']}")
            else:
                problems.append(f"{field_path or 'config'}: {error['msg']}")

        raise ConfigurationError(
            "Configuration validation failed",
            section_errors=section_errors,
            source=source,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types and ranges match the expected schema",
            ],
        )


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            source=str(config_file),
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            source=str(config_file),
            suggestions=[f"Ensure {config_file} is readable"],
        )

    if config_dict is None:
        raise ConfigurationError(
            "Configuration file is empty",
            source=str(config_file),
            suggestions=[
                "Copy config.example.yaml to config.yaml",
                "Use '{}' for an explicitly default configuration",
            ],
        )

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration root must be a mapping, got {type(config_dict).__name__}",
            source=str(config_file),
            suggestions=["Review config.example.yaml for correct format"],
        )

    return config_dict


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """Resolve the config file, or None when only defaults should be used."""
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                source=str(config_path),
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Copy config.example.yaml to config.yaml",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return None
