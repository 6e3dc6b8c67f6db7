"""Plugin loader - imports a plugin's entry module and its actions."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from actionhost.actions.loader import load_action
from actionhost.actions.types import ActionRecord, ActionSource
from actionhost.constants import PLUGIN_DEFAULT_ENTRY_POINT
from actionhost.errors import ActionLoadError, PluginLoadError
from actionhost.i18n import register_plugin_translations, translation_manager
from actionhost.i18n.manager import TranslationManager
from actionhost.plugins.definition import validate_plugin_definition
from actionhost.plugins.manifest import PluginDescriptor
from actionhost.plugins.registry import LoadedPlugin, LoadedPluginMeta, PluginState
from actionhost.utils.module_loader import load_module_from_path, unique_module_name

logger = logging.getLogger(__name__)


def validate_plugin_config(
    plugin_name: str,
    config_schema: Optional[Type[BaseModel]],
    user_config: Optional[Dict[str, Any]],
) -> Optional[Dict[str, Any]]:
    """Validate ``user_config`` against the plugin's schema.

    Returns the schema's ``model_dump()`` when both are present, otherwise
    ``user_config`` unchanged.

    Raises:
        PluginLoadError: If the values do not match the schema
    """
    if config_schema is None or user_config is None:
        return user_config
    try:
        return config_schema.model_validate(user_config).model_dump()
    except ValidationError as e:
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            logger.error(f"Invalid config for {plugin_name}: {location}: {err['msg']}")
        raise PluginLoadError(plugin_name, e) from e


class PluginLoader:
    """Loads plugin definitions and plugin actions.

    The async methods run the blocking imports in a worker thread so several
    plugins can be loaded concurrently.
    """

    def __init__(self, translator: Optional[TranslationManager] = None):
        self.translator = translator or translation_manager

    async def load_plugin(
        self,
        descriptor: PluginDescriptor,
        user_config: Optional[Dict[str, Any]] = None,
        enabled: bool = True,
    ) -> LoadedPlugin:
        return await asyncio.to_thread(self.load_plugin_sync, descriptor, user_config, enabled)

    async def load_plugin_actions(self, plugin: LoadedPlugin) -> List[ActionRecord]:
        return await asyncio.to_thread(self.load_plugin_actions_sync, plugin)

    async def register_translations(self, plugin: LoadedPlugin) -> int:
        if not plugin.locales_path:
            return 0
        return await asyncio.to_thread(
            register_plugin_translations,
            plugin.meta.i18n_namespace,
            plugin.locales_path,
            self.translator,
        )

    def load_plugin_sync(
        self,
        descriptor: PluginDescriptor,
        user_config: Optional[Dict[str, Any]] = None,
        enabled: bool = True,
    ) -> LoadedPlugin:
        """Load and validate a plugin's entry module.

        Args:
            descriptor: Discovered plugin
            user_config: Plugin configuration from the merged settings
            enabled: Whether the plugin is enabled

        Returns:
            LoadedPlugin

        Raises:
            PluginLoadError: If the entry point is missing, fails to import, or
                exports an invalid definition, declares a ``meta.name`` other
                than its directory name, or ``user_config`` does not match the
                plugin's config schema
        """
        logger.debug(f"Loading plugin: {descriptor.name}")
        try:
            return self._load(descriptor, user_config, enabled)
        except PluginLoadError:
            raise
        except Exception as e:
            raise PluginLoadError(descriptor.name, e) from e

    def _load(
        self,
        descriptor: PluginDescriptor,
        user_config: Optional[Dict[str, Any]],
        enabled: bool,
    ) -> LoadedPlugin:
        entry_point = descriptor.manifest.entry_point or PLUGIN_DEFAULT_ENTRY_POINT
        entry_path = (descriptor.path / entry_point).resolve()
        if not entry_path.is_file():
            raise FileNotFoundError(f"Plugin entry point not found: {entry_path}")

        module = load_module_from_path(entry_path, unique_module_name("actionhost_plugin", entry_path))
        definition = validate_plugin_definition(getattr(module, "plugin", None))
        meta = definition.meta
        if meta.name != descriptor.name:
            raise ValueError(
                f"Plugin meta.name '{meta.name}' does not match its directory '{descriptor.name}'"
            )

        action_paths = []
        for relative in definition.actions:
            absolute = (descriptor.path / relative).resolve()
            if absolute.is_file():
                action_paths.append(absolute)
            else:
                logger.warning(f"Action file not found: {absolute}")

        locales_path = None
        if definition.locales:
            candidate = (descriptor.path / definition.locales).resolve()
            if candidate.is_dir():
                locales_path = candidate
            else:
                logger.warning(f"Locales directory not found: {candidate}")

        validated_config = validate_plugin_config(descriptor.name, definition.config_schema, user_config)

        plugin = LoadedPlugin(
            meta=LoadedPluginMeta(
                name=meta.name,
                version=descriptor.manifest.version,
                description=meta.description or descriptor.manifest.description,
                author=meta.author or descriptor.manifest.author,
                i18n_namespace=meta.i18n_namespace or meta.name,
            ),
            path=descriptor.path,
            action_paths=action_paths,
            locales_path=locales_path,
            config_schema=definition.config_schema,
            user_config=validated_config,
            enabled=enabled,
        )

        status = "" if enabled else " [disabled]"
        logger.info(
            f"Loaded plugin: {plugin.name}@{plugin.meta.version} "
            f"({len(action_paths)} action(s)){status}"
        )
        return plugin

    def load_plugin_actions_sync(self, plugin: LoadedPlugin) -> List[ActionRecord]:
        """Load every action file of ``plugin``.

        Each file is independent: one that fails to import or validate is
        skipped with a warning.
        """
        actions: List[ActionRecord] = []

        for action_path in plugin.action_paths:
            try:
                action = load_action(action_path, ActionSource.PLUGIN, self.translator)
            except ActionLoadError as e:
                logger.warning(f"Failed to load action {action_path} of {plugin.name}: {e.cause}")
                continue

            action.plugin_name = plugin.name
            action.plugin_namespace = plugin.meta.i18n_namespace
            if action.category is None:
                action.category = f"plugin:{plugin.name}"
            actions.append(action)
            logger.debug(f"Loaded plugin action: {action.name}")

        plugin.state = PluginState.ACTIONS_LOADED
        return actions
