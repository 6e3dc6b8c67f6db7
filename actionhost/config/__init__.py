"""Layered configuration (user + workspace over defaults)."""

from actionhost.config.merge import (
    UNSET,
    LayeredConfig,
    PluginSetting,
    deep_merge,
    get_overridden_keys,
    is_key_overridden,
    merge_configs,
    merge_plugin_configs,
    merge_plugin_value,
    normalize_plugin_entry,
)
from actionhost.config.nested import delete_nested_value, get_nested_value, set_nested_value
from actionhost.config.schema import DEFAULT_CONFIG, ConfigDocument
from actionhost.config.store import FileConfigStore

__all__ = [
    "UNSET",
    "ConfigDocument",
    "DEFAULT_CONFIG",
    "FileConfigStore",
    "LayeredConfig",
    "PluginSetting",
    "deep_merge",
    "delete_nested_value",
    "get_nested_value",
    "get_overridden_keys",
    "is_key_overridden",
    "merge_configs",
    "merge_plugin_configs",
    "merge_plugin_value",
    "normalize_plugin_entry",
    "set_nested_value",
]
