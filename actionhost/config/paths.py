"""Filesystem locations for settings, actions and plugins."""

import os
from pathlib import Path
from typing import Dict, List, Optional

from actionhost.constants import (
    ACTIONS_DIR_NAME,
    CONFIG_PATH_ENV,
    HOME_ENV,
    HOST_DIR_NAME,
    PLUGIN_PATHS_ENV,
    PLUGINS_DIR_NAME,
    SETTINGS_FILE_NAME,
)

CONFIG_LAYERS = ("user", "workspace")


def user_home_dir() -> Path:
    """Per-user state directory (``~/.actionhost`` unless ACTIONHOST_HOME is set)."""
    override = os.getenv(HOME_ENV)
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / HOST_DIR_NAME


def workspace_dir(cwd: Optional[Path] = None) -> Path:
    return Path(cwd or Path.cwd()) / HOST_DIR_NAME


def get_config_path(layer: str, cwd: Optional[Path] = None) -> Path:
    """Get the settings file for a layer.

    ``ACTIONHOST_USER_CONFIG`` / ``ACTIONHOST_WORKSPACE_CONFIG`` override the
    default locations.

    Args:
        layer: "user" or "workspace"
        cwd: Project directory for the workspace layer

    Returns:
        Absolute path to the settings file
    """
    if layer not in CONFIG_LAYERS:
        raise ValueError(f"Unknown config layer: {layer!r}")

    override = os.getenv(CONFIG_PATH_ENV.format(layer=layer.upper()))
    if override:
        return Path(override).expanduser().resolve()

    if layer == "user":
        return user_home_dir() / SETTINGS_FILE_NAME
    return workspace_dir(cwd) / SETTINGS_FILE_NAME


def get_all_config_paths(cwd: Optional[Path] = None) -> Dict[str, Path]:
    return {layer: get_config_path(layer, cwd) for layer in CONFIG_LAYERS}


def get_action_directories(cwd: Optional[Path] = None) -> Dict[str, List[Path]]:
    """Action directories per source, lowest priority first within each list."""
    return {
        "global": [user_home_dir() / ACTIONS_DIR_NAME],
        "project": [workspace_dir(cwd) / ACTIONS_DIR_NAME],
    }


def get_plugin_search_paths(cwd: Optional[Path] = None) -> List[Path]:
    """Plugin search paths in lookup order (first found wins)."""
    paths = [
        workspace_dir(cwd) / PLUGINS_DIR_NAME,
        user_home_dir() / PLUGINS_DIR_NAME,
    ]
    extra = os.getenv(PLUGIN_PATHS_ENV, "")
    paths.extend(Path(p).expanduser() for p in extra.split(os.pathsep) if p)
    return paths
