"""
Provider configuration loading utilities.

Settings are merged from three sources, highest precedence first:
    1. Explicit keyword overrides (e.g. CLI flags)
    2. The "gcp" section of config_credentials.json
    3. Environment variables (GOOGLE_PROJECT, GOOGLE_CREDENTIALS, ...)

config_credentials.json layout:
    {
        "gcp": {
            "gcp_project_id": "my-project",
            "gcp_region": "us-central1",
            "gcp_zone": "us-central1-a",
            "gcp_credentials_file": "google-key.json"
        }
    }

Usage:
    from tfgoogle.core.config_loader import load_provider_config

    config = load_provider_config("/path/to/config_credentials.json")
    print(config.project)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from tfgoogle import constants as CONSTANTS
from .config import ProviderConfig
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _load_json_file(file_path: Path, required: bool = True) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Args:
        file_path: Path to the JSON file
        required: If True, raise error when file is missing. If False, return empty dict.

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
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration file: {e}",
            config_file=str(file_path)
        )


def _first_env(env: Mapping[str, str], names: list[str]) -> str:
    for name in names:
        value = env.get(name, "").strip()
        if value:
            return value
    return ""


def _settings_from_env(env: Mapping[str, str]) -> Dict[str, str]:
    return {
        "project": _first_env(env, CONSTANTS.PROJECT_ENV_VARS),
        "region": _first_env(env, CONSTANTS.REGION_ENV_VARS),
        "zone": _first_env(env, CONSTANTS.ZONE_ENV_VARS),
        "credentials": _first_env(env, CONSTANTS.CREDENTIALS_ENV_VARS),
        "access_token": _first_env(env, CONSTANTS.ACCESS_TOKEN_ENV_VARS),
    }


def _settings_from_file(config_path: Path) -> Dict[str, str]:
    content = _load_json_file(config_path, required=True)
    gcp = content.get(CONSTANTS.CONFIG_GCP_SECTION, {})
    if not isinstance(gcp, dict):
        raise ConfigurationError(
            f"'{CONSTANTS.CONFIG_GCP_SECTION}' section must be an object",
            config_file=str(config_path)
        )

    settings = {}
    for setting, key in CONSTANTS.CONFIG_GCP_KEYS.items():
        value = gcp.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigurationError(f"'{key}' must be a string", config_file=str(config_path))
        settings[setting] = value.strip()

    # Resolve relative key file paths relative to the config file directory
    creds_file = settings.get("credentials", "")
    if creds_file and not os.path.isabs(creds_file):
        settings["credentials"] = str(config_path.parent / creds_file)

    return settings


def load_provider_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Any
) -> ProviderConfig:
    """
    Build a ProviderConfig from overrides, config file and environment.

    Args:
        config_path: Optional path to config_credentials.json. When given the
                     file must exist.
        env: Mapping used instead of os.environ (used by tests)
        **overrides: ProviderConfig fields; None or empty values are ignored

    Returns:
        ProviderConfig with the merged settings

    Raises:
        ConfigurationError: If the config file is missing or invalid, or an
                            override names an unknown setting
    """
    env = os.environ if env is None else env

    settings = {key: value for key, value in _settings_from_env(env).items() if value}

    if config_path:
        settings.update(_settings_from_file(Path(config_path)))
        logger.debug(f"Loaded provider settings from {config_path}")

    allowed = set(CONSTANTS.CONFIG_GCP_KEYS) | {"scopes"}
    for key, value in overrides.items():
        if key not in allowed:
            raise ConfigurationError(f"Unknown provider setting: {key}")
        if value:
            settings[key] = value

    config = ProviderConfig(**settings)
    logger.debug(f"Provider configured (project={config.project or '<unset>'}, region={config.region or '<unset>'})")
    return config
