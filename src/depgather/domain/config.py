from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences using JSON in the user data
directory. The active configuration is a flat dictionary merged from
defaults, persisted state and command-line overrides.
"""

import getpass
import json
import logging
import os
import socket
from typing import Any, Dict

from depgather.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_LDD_COMMAND,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_MAX_SYMLINK_HOPS,
    DEFAULT_PACKAGE_VERSION,
    DEFAULT_PRIORITY,
    DEFAULT_SECTION,
)
from depgather.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_file() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def default_maintainer() -> str:
    """'user <user@host>' built from the current login and hostname."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "unknown"
    host = socket.gethostname() or "localhost"
    return f"{user} <{user}@{host}>"

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
        # Gathering
        "output_dir": "",
        "manifest_name": DEFAULT_MANIFEST_NAME,
        "write_manifest": True,
        "ldd_command": DEFAULT_LDD_COMMAND,
        "ldd_timeout": None,
        "max_symlink_hops": DEFAULT_MAX_SYMLINK_HOPS,

        # Packaging
        "package_version": DEFAULT_PACKAGE_VERSION,
        "package_section": DEFAULT_SECTION,
        "package_priority": DEFAULT_PRIORITY,
        "maintainer": default_maintainer(),
        "package_output_dir": "",
    }


def get_default_app_state() -> Dict[str, Any]:
    return {
        "version": CURRENT_CONFIG_VERSION,
        "settings": get_default_config(),
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Unknown keys are preserved; missing keys are filled from defaults.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    state = get_default_app_state()
    config_file = get_config_file()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    if isinstance(data.get("settings"), dict):
        state["settings"].update(data["settings"])
    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    config_file = get_config_file()
    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")

# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """
    Retrieve the persisted settings merged over defaults.
    """
    return dict(load_app_state()["settings"])


def save_config(config: Dict[str, Any]) -> None:
    state = load_app_state()
    state["settings"] = config
    save_app_state(state)
