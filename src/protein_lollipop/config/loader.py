"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import LollipopConfig


def load_config(config_path: Path | str) -> LollipopConfig:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated LollipopConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    # An empty file is a valid "all defaults" config
    if not yaml_content.strip():
        return LollipopConfig()

    return pydantic_yaml.parse_yaml_raw_as(LollipopConfig, yaml_content)


def apply_overrides(
    config: LollipopConfig,
    overrides: dict[str, Any],
) -> LollipopConfig:
    """
    Return a revalidated copy of config with overrides applied.

    Used by CLI flags that take precedence over config file values. Keys
    whose value is None are skipped so unset flags leave the config alone.

    Args:
        config: Loaded configuration
        overrides: Values to override; dotted keys address nested sections
                   (e.g. "api.timeout_seconds")

    Returns:
        Validated LollipopConfig with overrides applied

    Raises:
        pydantic.ValidationError: If the overridden config is invalid
    """
    config_dict = config.model_dump()

    for key, value in overrides.items():
        if value is None:
            continue
        *sections, field = key.split(".")
        target = config_dict
        for section in sections:
            target = target[section]
        target[field] = value

    return LollipopConfig.model_validate(config_dict)


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> LollipopConfig:
    """
    Load config from YAML and apply overrides (see apply_overrides).

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If final config is invalid
    """
    return apply_overrides(load_config(config_path), overrides)
