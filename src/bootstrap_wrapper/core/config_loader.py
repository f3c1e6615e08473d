"""
Configuration loading utilities.

This module loads the harness configuration and AWS credentials from
optional JSON files.

Files:
    1. config_harness.json - Overrides for HarnessConfig fields (optional)
    2. config_credentials_aws.json - AWS access keys and region (optional)

When no credentials file is present, boto3 falls back to its default
credential chain (environment variables, shared config, instance roles).

Usage:
    from bootstrap_wrapper.core.config_loader import load_harness_config

    config = load_harness_config(Path("config_harness.json"))
"""

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from .context import HarnessConfig
from .exceptions import ConfigurationError
from .. import constants as CONSTANTS

_NUMERIC_FIELDS = (
    "memory_size",
    "role_propagation_timeout_seconds",
    "role_propagation_retry_delay_seconds",
)


def _load_json_file(file_path: Path, required: bool = True) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Args:
        file_path: Path to the JSON file
        required: If True, raise error when file is missing. If False, return empty dict.

    Returns:
        Parsed JSON content as dictionary

    Raises:
        ConfigurationError: If file is missing (when required) or has invalid JSON
    """
    if not file_path.exists():
        if required:
            raise ConfigurationError(
                f"Required configuration file not found: {file_path.name}",
                config_file=str(file_path)
            )
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration file: {e}",
            config_file=str(file_path)
        )

    if not isinstance(content, dict):
        raise ConfigurationError(
            "Configuration file must contain a JSON object",
            config_file=str(file_path)
        )
    return content


def load_harness_config(config_path: Optional[Path] = None) -> HarnessConfig:
    """
    Load the harness configuration.

    Unknown keys are rejected so typos do not silently fall back to defaults.

    Args:
        config_path: Path to a config_harness.json file, or None for defaults

    Returns:
        HarnessConfig with defaults overridden by the file contents

    Raises:
        ConfigurationError: If the file is invalid or a value fails validation
    """
    raw = _load_json_file(Path(config_path), required=True) if config_path else {}

    known = {f.name for f in fields(HarnessConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {unknown}",
            config_file=str(config_path)
        )

    for name in _NUMERIC_FIELDS:
        if name in raw:
            value = raw[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(
                    f"'{name}' must be a positive number, got {value!r}",
                    config_file=str(config_path)
                )

    if not raw.get("bucket_prefix", CONSTANTS.TEST_BUCKET_ROOT):
        raise ConfigurationError(
            "'bucket_prefix' must not be empty",
            config_file=str(config_path)
        )

    if raw.get("deployment_package_path"):
        raw["deployment_package_path"] = Path(raw["deployment_package_path"])

    return HarnessConfig(**raw)


def load_credentials(credentials_path: Optional[Path] = None) -> Dict[str, str]:
    """
    Load AWS credentials.

    Args:
        credentials_path: Path to config_credentials_aws.json, or None

    Returns:
        Credentials dictionary, e.g. {"aws_access_key_id": "...", ...}.
        Empty when no file is given or it does not exist.

    Raises:
        ConfigurationError: If the file is present but incomplete
    """
    if credentials_path is None:
        return {}

    creds = _load_json_file(Path(credentials_path), required=False)
    if not creds:
        return {}

    missing = [k for k in CONSTANTS.REQUIRED_CREDENTIALS_FIELDS if not creds.get(k)]
    if missing:
        raise ConfigurationError(
            f"Missing required credential fields: {missing}",
            config_file=str(credentials_path)
        )
    return creds
