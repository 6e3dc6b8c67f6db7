"""actionhost - discover, configure and run pluggable actions."""

from actionhost.actions.types import ActionSource, define_action
from actionhost.errors import (
    ActionExecutionError,
    ActionHostError,
    ActionLoadError,
    ActionNotFoundError,
    ConfigLoadError,
    ConfigWriteError,
    PluginLoadError,
    format_error,
)
from actionhost.plugins.definition import PluginMeta, define_plugin
from actionhost.prompt import SelectChoice

__version__ = "0.1.0"

__all__ = [
    "ActionExecutionError",
    "ActionHost",
    "ActionHostError",
    "ActionLoadError",
    "ActionNotFoundError",
    "ActionSource",
    "ConfigLoadError",
    "ConfigWriteError",
    "PluginLoadError",
    "PluginMeta",
    "SelectChoice",
    "define_action",
    "define_plugin",
    "format_error",
]


def __getattr__(name):
    if name == "ActionHost":
        from actionhost.host import ActionHost
        return ActionHost
    raise AttributeError(f"module 'actionhost' has no attribute {name!r}")
