# vps_setup/config/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file, and command-line arguments, applying a specific
order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (VPS_SETUP_* via BaseSettings)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

CONFIG_FILE_DEFAULT = "config.yaml"

# Project checkout root (this file lives in <root>/vps_setup/config/).
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively update `source` with the values from `overrides`.

    Nested dictionaries are merged key by key. A None value in `overrides`
    never replaces an existing value.

    Args:
        source: The dictionary to update. It is modified in place.
        overrides: The values to apply.

    Returns:
        The updated `source` dictionary.
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


def _find_config_file(config_file_path: str) -> Optional[Path]:
    candidate = Path(config_file_path).expanduser()
    if candidate.is_absolute():
        return candidate if candidate.is_file() else None
    for root in (Path.cwd(), PROJECT_ROOT):
        if (root / candidate).is_file():
            return root / candidate
    return None


def load_yaml_config(
    config_file_path: str,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read the YAML configuration file if there is one.

    A missing file is normal. An unreadable or malformed file is reported
    as a warning and ignored.

    Args:
        config_file_path: Path to the YAML file, absolute or relative to the
            working directory or the project root.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The parsed mapping, or an empty dict.
    """
    logger_to_use = current_logger if current_logger else module_logger

    yaml_config_path = _find_config_file(config_file_path)
    if yaml_config_path is None:
        logger_to_use.debug(
            f"Configuration file '{config_file_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.debug(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Load application settings with the precedence
    defaults < environment < YAML file < command line.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file. Falls back to
            `cli_args.config`, then to config.yaml.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged configuration fails validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if config_file_path is None:
        config_file_path = (
            getattr(cli_args, "config", None) or CONFIG_FILE_DEFAULT
        )

    try:
        current_values_dict = AppSettings().model_dump(exclude_defaults=False)
    except ValidationError as e:
        logger_to_use.error(f"Invalid VPS_SETUP_* environment variable: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    current_values_dict = _deep_update(
        current_values_dict,
        load_yaml_config(config_file_path, current_logger=logger_to_use),
    )

    if cli_args:
        cli_arg_dict = vars(cli_args)
        mapped_cli_values: Dict[str, Any] = {}

        for cli_key, cli_value in cli_arg_dict.items():
            if cli_value is None:
                continue

            if cli_key == "scripts_dir":
                mapped_cli_values["scripts_dir"] = str(cli_value)
            elif cli_key == "verbose" and cli_value:
                mapped_cli_values["log_level"] = "DEBUG"
            elif cli_key == "no_color" and cli_value:
                mapped_cli_values["color"] = False

        current_values_dict = _deep_update(
            current_values_dict, mapped_cli_values
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    return final_settings
