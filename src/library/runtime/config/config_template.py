"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.library.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        if ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        value = os.getenv(var_expr)
        if value is None:
            raise ValueError(f"Required environment variable {var_expr} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)


def parse_config_text(content: str) -> ConfigData:
    """Substitute placeholders in ``content`` and validate the ``config`` section.

    Raises:
        ValueError: If a required variable is missing, the YAML is malformed
            or the configuration does not validate.
    """
    substituted = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not isinstance(loaded, dict):
        raise ValueError("Failed to parse YAML: expected a mapping at the top level")

    try:
        return ConfigData(**(loaded.get("config") or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        The validated configuration

    Raises:
        ValueError: If required environment variables are missing or the
            configuration is invalid
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    logger.debug("Loading configuration from {}", file_path)
    return parse_config_text(content)
