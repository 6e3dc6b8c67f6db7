"""Plugin definition contract and ``define_plugin`` helper."""

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Type, Union

from pydantic import BaseModel

from actionhost.constants import PLUGIN_PREFIX

_NAME_SUFFIX = re.compile(r"^[a-z0-9-]+$")


@dataclass
class PluginMeta:
    name: str
    description: str = ""
    author: Optional[str] = None
    i18n_namespace: Optional[str] = None


@dataclass
class PluginDefinition:
    """What a plugin's entry module exports as ``plugin``."""

    meta: PluginMeta
    actions: List[str] = field(default_factory=list)
    locales: Optional[str] = None
    config_schema: Optional[Type[BaseModel]] = None


def _coerce_meta(meta: Any) -> PluginMeta:
    if isinstance(meta, PluginMeta):
        return meta
    if isinstance(meta, Mapping):
        if not meta.get("name"):
            raise ValueError("Plugin meta.name is required")
        return PluginMeta(
            name=meta["name"],
            description=meta.get("description", ""),
            author=meta.get("author"),
            i18n_namespace=meta.get("i18n_namespace"),
        )
    raise ValueError("Plugin meta is required")


def validate_plugin_name(name: Any) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError("Plugin meta.name is required")
    if not name.startswith(PLUGIN_PREFIX):
        raise ValueError(f"Plugin name must start with '{PLUGIN_PREFIX}', got: {name}")
    if not _NAME_SUFFIX.match(name[len(PLUGIN_PREFIX):]):
        raise ValueError(
            f"Plugin name after '{PLUGIN_PREFIX}' must contain only lowercase "
            f"alphanumeric characters and dashes, got: {name}"
        )


def define_plugin(
    meta: Union[PluginMeta, Mapping[str, Any]],
    actions: List[str],
    locales: Optional[str] = None,
    config_schema: Optional[Type[BaseModel]] = None,
) -> PluginDefinition:
    """Declare a plugin in its entry module.

    Example::

        plugin = define_plugin(
            meta={"name": "actionhost-plugin-timer"},
            actions=["actions/timer.py"],
            locales="locales",
            config_schema=TimerConfig,
        )

    Raises:
        ValueError: With the specific reason the definition is invalid
    """
    plugin_meta = _coerce_meta(meta)
    validate_plugin_name(plugin_meta.name)

    if actions is None:
        raise ValueError("Plugin actions list is required")
    if not isinstance(actions, (list, tuple)):
        raise ValueError("Plugin actions must be a list")
    if len(actions) == 0:
        raise ValueError("Plugin must have at least one action")
    for action_path in actions:
        if not isinstance(action_path, str):
            raise ValueError(f"Action path must be a string, got: {type(action_path).__name__}")

    if locales is not None and not isinstance(locales, str):
        raise ValueError("Plugin locales must be a string path")

    if config_schema is not None and not (
        isinstance(config_schema, type) and issubclass(config_schema, BaseModel)
    ):
        raise ValueError("Plugin config_schema must be a pydantic model class")

    return PluginDefinition(
        meta=plugin_meta,
        actions=list(actions),
        locales=locales,
        config_schema=config_schema,
    )


def validate_plugin_definition(exported: Any) -> PluginDefinition:
    """Re-validate whatever an entry module exported as ``plugin``.

    Accepts a ``PluginDefinition`` or an equivalent mapping.
    """
    if isinstance(exported, PluginDefinition):
        return define_plugin(
            exported.meta, exported.actions, exported.locales, exported.config_schema
        )
    if isinstance(exported, Mapping):
        return define_plugin(
            exported.get("meta"),
            exported.get("actions"),
            exported.get("locales"),
            exported.get("config_schema"),
        )
    raise ValueError("Plugin module must export a `plugin` definition")
