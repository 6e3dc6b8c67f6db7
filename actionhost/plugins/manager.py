"""Plugin manager - top-level orchestrator for the plugin system."""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from actionhost.actions.types import ActionRecord
from actionhost.config.merge import normalize_plugin_entry
from actionhost.errors import PluginLoadError
from actionhost.plugins.discovery import PluginDiscovery
from actionhost.plugins.loader import PluginLoader, validate_plugin_config
from actionhost.plugins.manifest import PluginDescriptor
from actionhost.plugins.registry import LoadedPlugin, PluginState

logger = logging.getLogger(__name__)


def plugin_setting(config: Optional[Mapping[str, Any]], name: str):
    """Enabled flag and plugin config for ``name`` from a merged configuration."""
    plugins = (config or {}).get("plugins") or {}
    return normalize_plugin_entry(plugins.get(name))


class PluginManager:
    """Coordinates discovery, loading and enable/disable of plugins.

    Lifecycle per plugin: discovered -> loaded (enabled or disabled) ->
    actions loaded (only when enabled).
    """

    def __init__(self, discovery: PluginDiscovery, loader: Optional[PluginLoader] = None):
        self.discovery = discovery
        self.loader = loader or PluginLoader()
        self._plugins: List[LoadedPlugin] = []
        self._actions: List[ActionRecord] = []
        self._loaded = False

    async def load_all(self, config: Optional[Mapping[str, Any]] = None) -> None:
        """Discover and load all plugins concurrently.

        A plugin that fails to load is logged and left out; the others are
        unaffected. Calling this again after a successful run is a no-op.

        Args:
            config: Merged configuration (for ``plugins`` enable/config entries)
        """
        if self._loaded:
            logger.debug("Plugins already loaded, skipping")
            return

        logger.info("Loading plugins...")
        descriptors = self.discovery.discover_all()

        results = await asyncio.gather(
            *(self._load_one(descriptor, config) for descriptor in descriptors),
            return_exceptions=True,
        )

        for descriptor, result in zip(descriptors, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.warning(f"Failed to load plugin {descriptor.name}: {result}")
                continue

            plugin, actions = result
            self._plugins.append(plugin)
            self._actions.extend(actions)
            status = "enabled" if plugin.enabled else "disabled"
            logger.info(
                f"Loaded plugin: {plugin.name}@{plugin.meta.version} ({status}) "
                f"with {len(actions)} action(s)"
            )

        self._loaded = True
        logger.info(
            f"Loaded {len(self._plugins)}/{len(descriptors)} plugin(s) "
            f"with {len(self._actions)} action(s)"
        )

    async def _load_one(
        self, descriptor: PluginDescriptor, config: Optional[Mapping[str, Any]]
    ) -> Tuple[LoadedPlugin, List[ActionRecord]]:
        setting = plugin_setting(config, descriptor.name)
        plugin = await self.loader.load_plugin(descriptor, setting.config, setting.enabled)

        actions: List[ActionRecord] = []
        if plugin.enabled:
            actions = await self.loader.load_plugin_actions(plugin)
        else:
            logger.debug(f"Plugin disabled: {descriptor.name}")

        if plugin.locales_path:
            try:
                await self.loader.register_translations(plugin)
                logger.debug(f"Registered translations for plugin: {plugin.name}")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to register translations for plugin {plugin.name}: {e}")

        return plugin, actions

    async def reload_actions(self, config: Optional[Mapping[str, Any]]) -> List[ActionRecord]:
        """Re-apply enable/disable and plugin config from ``config``.

        Every plugin's ``enabled`` flag and ``user_config`` are recomputed, the
        actions of enabled plugins are reloaded, and the cached action list is
        replaced wholesale. A plugin whose config no longer matches its
        schema keeps its previous ``user_config`` and contributes no actions.

        Returns:
            The new action list
        """
        actions: List[ActionRecord] = []

        for plugin in self._plugins:
            setting = plugin_setting(config, plugin.name)
            plugin.enabled = setting.enabled
            try:
                plugin.user_config = validate_plugin_config(
                    plugin.name, plugin.config_schema, setting.config
                )
            except PluginLoadError as e:
                logger.warning(f"Skipping actions of {plugin.name}: {e.message}")
                plugin.state = PluginState.ERROR
                continue

            if plugin.enabled:
                actions.extend(await self.loader.load_plugin_actions(plugin))
            else:
                plugin.state = PluginState.LOADED

        self._actions = actions
        enabled_count = sum(1 for p in self._plugins if p.enabled)
        logger.info(
            f"Reloaded actions: {len(actions)} action(s) from {enabled_count} enabled plugin(s)"
        )
        return list(actions)

    def get_plugins(self) -> List[LoadedPlugin]:
        return list(self._plugins)

    def get_plugin(self, name: str) -> Optional[LoadedPlugin]:
        return next((p for p in self._plugins if p.name == name), None)

    def get_actions(self) -> List[ActionRecord]:
        return list(self._actions)

    def list_plugins(self) -> List[Dict[str, Any]]:
        """List all plugins as dicts."""
        return [p.to_dict() for p in self._plugins]

    @property
    def count(self) -> int:
        return len(self._plugins)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def clear(self) -> None:
        self._plugins = []
        self._actions = []
        self._loaded = False
