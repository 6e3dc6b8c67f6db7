"""Plugin settings use cases: enable/disable and per-plugin config."""

import logging
from typing import Any, Dict, Mapping

from actionhost.config.store import FileConfigStore
from actionhost.plugins.loader import validate_plugin_config
from actionhost.plugins.manager import PluginManager, plugin_setting

logger = logging.getLogger(__name__)


class PluginService:
    """Persists plugin settings and keeps the manager's plugins in step."""

    def __init__(self, store: FileConfigStore, manager: PluginManager):
        self.store = store
        self.manager = manager

    def toggle_plugin(self, name: str, enabled: bool, layer: str = "workspace") -> Dict[str, Any]:
        """Write ``plugins.<name>.enabled`` to ``layer``.

        The loaded plugin's ``enabled`` flag is updated in place; its actions
        are only (un)loaded by ``PluginManager.reload_actions``.

        Returns:
            The new merged configuration

        Raises:
            ConfigWriteError: If the settings file cannot be written
        """
        self.store.save(layer, f"plugins.{name}.enabled", enabled)

        plugin = self.manager.get_plugin(name)
        if plugin is not None:
            plugin.enabled = enabled

        logger.info(f"Plugin {name} {'enabled' if enabled else 'disabled'}")
        return self.store.load_merged()

    def save_plugin_config(
        self, name: str, values: Mapping[str, Any], layer: str = "workspace"
    ) -> Dict[str, Any]:
        """Save each key of ``values`` under ``plugins.<name>.config``.

        Keys are written one by one so other keys in the plugin config survive.

        Returns:
            The new merged configuration

        Raises:
            ConfigWriteError: If the settings file cannot be written
            PluginLoadError: If the saved values do not match the plugin's
                config schema
        """
        for key, value in values.items():
            self.store.save(layer, f"plugins.{name}.config.{key}", value)

        merged = self.store.load_merged()
        self.refresh_user_config(name, merged)
        logger.info(f"Plugin {name} configuration saved to {layer} layer ({len(values)} key(s))")
        return merged

    def refresh_user_config(self, name: str, merged_config: Mapping[str, Any]) -> None:
        """Validate the plugin's merged ``config`` and copy it onto the loaded plugin.

        Raises:
            PluginLoadError: If the values do not match the plugin's config
                schema (the loaded plugin keeps its previous config)
        """
        plugin = self.manager.get_plugin(name)
        if plugin is None:
            logger.debug(f"Plugin not loaded, nothing to refresh: {name}")
            return
        plugin.user_config = validate_plugin_config(
            name, plugin.config_schema, plugin_setting(merged_config, name).config
        )
