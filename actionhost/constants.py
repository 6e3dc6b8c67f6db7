"""Global constants for the action host."""

from pathlib import Path

# Directory holding per-project and per-user state (settings, actions, plugins)
HOST_DIR_NAME = ".actionhost"

SETTINGS_FILE_NAME = "settings.json"
ACTIONS_DIR_NAME = "actions"
PLUGINS_DIR_NAME = "plugins"

# Plugin packages must be named with this prefix
PLUGIN_PREFIX = "actionhost-plugin-"
PLUGIN_MANIFEST_FILE = "plugin.json"
PLUGIN_DEFAULT_ENTRY_POINT = "plugin.py"

# Environment overrides
HOME_ENV = "ACTIONHOST_HOME"
PLUGIN_PATHS_ENV = "ACTIONHOST_PLUGIN_PATHS"  # os.pathsep separated
CONFIG_PATH_ENV = "ACTIONHOST_{layer}_CONFIG"

SUPPORTED_LOCALES = ("en", "ja")
FALLBACK_LOCALE = "en"

# Bundled translation files
LOCALES_DIR = Path(__file__).resolve().parent / "locales"
