# provisioner/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the provisioner.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file, and command-line arguments, applying this order of
precedence (later wins):
1. Pydantic Model Defaults
2. Environment Variables (PROVISION_ prefix, '__' for nested fields)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from provisioner import config as static_config

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the configuration file or the resolved settings are invalid."""


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from another dictionary
    `overrides`. Nested dictionaries are merged key by key; any other value in
    `overrides` replaces the one in `source`. None values in `overrides` never
    replace an existing value.

    Parameters:
        source: Dict[str, Any]
            The dictionary to be updated. This dictionary gets modified in place.
        overrides: Dict[str, Any]
            The dictionary containing values to update or add to the `source`.

    Returns:
        Dict[str, Any]:
            The updated dictionary after applying all `overrides` to the input `source`.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def _read_yaml_config(
    yaml_config_path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    if not (yaml_config_path.exists() and yaml_config_path.is_file()):
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Could not parse YAML config file '{yaml_config_path}': {e}"
        ) from e
    except IOError as e:
        raise ConfigurationError(
            f"Could not read config file '{yaml_config_path}': {e}"
        ) from e

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        raise ConfigurationError(
            f"Config file '{yaml_config_path}' does not contain a YAML mapping."
        )
    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def _cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if getattr(cli_args, "log_file", None):
        overrides["log_file"] = cli_args.log_file
    if getattr(cli_args, "variant", None):
        overrides["step_variant"] = cli_args.variant
    if getattr(cli_args, "home_dir", None):
        overrides["home_dir"] = cli_args.home_dir
    return overrides


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings with the following precedence:
    1. Pydantic Model Defaults.
    2. Environment Variables (loaded by Pydantic BaseSettings).
    3. Values from the YAML configuration file.
    4. Command-Line Arguments (highest precedence, overrides all else).
       `--skip` values are added to `skip_steps` rather than replacing it.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file. Falls back to
            `cli_args.config_file`, then to `provision.yaml` in the working directory.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        ConfigurationError: If the YAML file is unreadable or the merged values fail validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        settings_after_env_and_defaults = AppSettings()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings in environment variables: {e}"
        ) from e
    current_values_dict = settings_after_env_and_defaults.model_dump(
        exclude_defaults=False
    )

    if config_file_path is None:
        config_file_path = (
            getattr(cli_args, "config_file", None)
            if cli_args is not None
            else None
        ) or static_config.DEFAULT_CONFIG_FILE

    yaml_data = _read_yaml_config(Path(config_file_path), logger_to_use)
    current_values_dict = _deep_update(current_values_dict, yaml_data)

    if cli_args is not None:
        current_values_dict = _deep_update(
            current_values_dict, _cli_overrides(cli_args)
        )
        extra_skips = getattr(cli_args, "skip", None) or []
        merged_skips = list(current_values_dict.get("skip_steps") or [])
        for tag in extra_skips:
            if tag not in merged_skips:
                merged_skips.append(tag)
        current_values_dict["skip_steps"] = merged_skips

    try:
        return AppSettings(**current_values_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
