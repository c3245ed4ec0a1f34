from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of the sync settings (credential, script path,
universe/place identifiers, Details type key and polling bounds) as JSON in
the user data directory. Saved values are merged over defaults so that new
keys always exist, and the credential may be overridden from the environment.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from rblxsync.domain.constants import (
    API_KEY_ENV_VAR,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TYPE_KEY,
    OPEN_CLOUD_BASE_URL,
)
from rblxsync.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"


def get_config_file() -> str:
    """Absolute location of the persisted configuration."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Target
        "api_key": "",
        "path": "",
        "universe_id": "",
        "place_id": "",
        "type_key": DEFAULT_TYPE_KEY,

        # Endpoint
        "base_url": OPEN_CLOUD_BASE_URL,
        "request_timeout": DEFAULT_REQUEST_TIMEOUT,

        # Operation polling (None = wait indefinitely)
        "poll_interval": DEFAULT_POLL_INTERVAL,
        "poll_max_attempts": None,
        "poll_timeout": None,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the saved configuration merged over defaults.

    Unknown keys are discarded, a missing or corrupted file yields defaults,
    and RBLXSYNC_API_KEY (when set) takes precedence over the stored key.

    Args:
        config_file: Optional override of the configuration location.

    Returns:
        Dict[str, Any]: The effective configuration.
    """
    path = config_file or get_config_file()
    config = get_default_config()

    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)

            if isinstance(data, dict):
                for key in config:
                    if key in data:
                        config[key] = data[key]
            else:
                logger.warning("Corrupted config file. Using defaults.")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config: {e}. Using defaults.")
    else:
        logger.debug("Config file not found. Returning defaults.")

    env_key = os.environ.get(API_KEY_ENV_VAR)
    if env_key:
        logger.debug(f"Using API key from environment variable {API_KEY_ENV_VAR}.")
        config["api_key"] = env_key

    return config


def save_config(config: Dict[str, Any], config_file: Optional[str] = None) -> str:
    """
    Persist known configuration keys to disk.

    Args:
        config: Configuration values to save.
        config_file: Optional override of the configuration location.

    Returns:
        str: Path of the written file.
    """
    path = config_file or get_config_file()
    defaults = get_default_config()
    state: Dict[str, Any] = {k: config.get(k, v) for k, v in defaults.items()}
    state["version"] = CURRENT_CONFIG_VERSION

    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(state, f, ensure_ascii=False, indent=4)
    logger.debug(f"Configuration saved to {path}")
    return path


def update_config(
        overrides: Dict[str, Any],
        config_file: Optional[str] = None
) -> Dict[str, Any]:
    """
    Merge non-None overrides into the saved configuration and persist it.

    The environment credential is never written back to disk.
    """
    path = config_file or get_config_file()
    current = load_config(path)
    env_key = os.environ.get(API_KEY_ENV_VAR)
    if env_key and current.get("api_key") == env_key:
        current["api_key"] = _stored_api_key(path)

    for key, value in overrides.items():
        if key in current and value is not None:
            current[key] = value

    save_config(current, path)
    return current


def mask_secret(value: str) -> str:
    """Hide all but the last four characters of a credential."""
    if not value:
        return ""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def _stored_api_key(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return str(data.get("api_key", "")) if isinstance(data, dict) else ""
    except (OSError, ValueError):
        return ""
