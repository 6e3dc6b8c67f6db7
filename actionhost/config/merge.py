"""Layered configuration merging (workspace > user > defaults)."""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Union


class _Unset:
    """Marker for "no value", distinct from JSON ``null``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET: Any = _Unset()

PluginConfigValue = Union[bool, Dict[str, Any]]


@dataclass
class LayeredConfig:
    """Raw (validated) documents of both layers; ``None`` means layer absent."""

    user: Optional[Dict[str, Any]] = None
    workspace: Optional[Dict[str, Any]] = None


class PluginSetting(NamedTuple):
    """Normalized plugin entry."""

    enabled: bool
    config: Optional[Dict[str, Any]]


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two configuration dicts.

    - dicts are merged recursively
    - lists and scalars in ``override`` replace the ``base`` value
    - ``UNSET`` values in ``override`` are skipped

    Neither argument is mutated.
    """
    result = dict(base)

    for key, value in override.items():
        if value is UNSET:
            continue

        base_value = result.get(key, UNSET)
        if isinstance(value, dict) and isinstance(base_value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value

    return result


def _present(value: Any) -> bool:
    return value is not UNSET and value is not None


def merge_plugin_value(user: Any = UNSET, workspace: Any = UNSET) -> PluginConfigValue:
    """Merge one plugin entry of the user layer with the workspace layer.

    Args:
        user: Lower-priority entry (bool, dict, or UNSET/None when absent)
        workspace: Higher-priority entry

    Returns:
        Merged entry. A workspace boolean replaces the user entry entirely;
        object entries keep the deep-merged ``config``.
    """
    if not _present(workspace):
        return user if _present(user) else False

    if not _present(user):
        return workspace

    if isinstance(workspace, bool):
        return workspace

    ws_enabled = workspace.get("enabled")
    ws_config = workspace.get("config")

    if isinstance(user, bool):
        return {
            "enabled": ws_enabled if ws_enabled is not None else user,
            "config": ws_config if ws_config is not None else {},
        }

    user_config = user.get("config")
    if ws_config is None:
        config = user_config
    elif user_config is None:
        config = ws_config
    else:
        config = deep_merge(user_config, ws_config)

    return {
        "enabled": ws_enabled if ws_enabled is not None else user.get("enabled"),
        "config": config,
    }


def merge_plugin_configs(
    user: Optional[Dict[str, Any]], workspace: Optional[Dict[str, Any]]
) -> Dict[str, PluginConfigValue]:
    """Merge the ``plugins`` maps of both layers, name by name."""
    user = user or {}
    workspace = workspace or {}

    names = list(user)
    names.extend(name for name in workspace if name not in user)

    return {
        name: merge_plugin_value(user.get(name, UNSET), workspace.get(name, UNSET))
        for name in names
    }


def merge_configs(layered: LayeredConfig, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Merge both layers over ``defaults``. The result shares no state with inputs."""
    user, workspace = layered.user, layered.workspace

    merged = deep_merge(defaults, user) if user else dict(defaults)
    if workspace:
        merged = deep_merge(merged, workspace)

    user_plugins = (user or {}).get("plugins")
    workspace_plugins = (workspace or {}).get("plugins")
    if user_plugins or workspace_plugins:
        merged["plugins"] = merge_plugin_configs(user_plugins, workspace_plugins)

    return copy.deepcopy(merged)


def normalize_plugin_entry(value: Any) -> PluginSetting:
    """Turn a (merged) plugin entry into ``PluginSetting``.

    ``False`` disables, an object is enabled unless ``enabled`` is exactly
    ``False``, and an absent entry is enabled.
    """
    if isinstance(value, bool):
        return PluginSetting(enabled=value, config=None)
    if isinstance(value, dict):
        config = value.get("config")
        return PluginSetting(
            enabled=value.get("enabled") is not False,
            config=config if isinstance(config, dict) else None,
        )
    return PluginSetting(enabled=True, config=None)


def get_overridden_keys(
    user: Optional[Dict[str, Any]], workspace: Optional[Dict[str, Any]]
) -> List[str]:
    """Dot paths set in the user layer that the workspace layer overrides."""
    if not user or not workspace:
        return []

    overridden: List[str] = []

    def walk(user_obj: Dict[str, Any], workspace_obj: Dict[str, Any], prefix: str) -> None:
        for key, user_value in user_obj.items():
            if key not in workspace_obj:
                continue
            full_key = f"{prefix}.{key}" if prefix else key
            workspace_value = workspace_obj[key]
            if isinstance(user_value, dict) and isinstance(workspace_value, dict):
                walk(user_value, workspace_value, full_key)
            else:
                overridden.append(full_key)

    walk(user, workspace, "")
    return overridden


def is_key_overridden(key: str, overridden_keys: List[str]) -> bool:
    return key in overridden_keys
