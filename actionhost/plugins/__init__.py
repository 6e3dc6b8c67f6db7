"""Plugin system: discovery, loading, enable/disable.

Imports are lazy so lightweight callers (e.g. ``manage_plugins.py`` listing
manifests) do not import the action machinery.
"""

__all__ = [
    "LoadedPlugin",
    "LoadedPluginMeta",
    "PluginDefinition",
    "PluginDescriptor",
    "PluginDiscovery",
    "PluginLoader",
    "PluginManager",
    "PluginManifest",
    "PluginMeta",
    "PluginService",
    "PluginState",
    "create_plugin_manager",
    "define_plugin",
]


def create_plugin_manager(cwd=None, translator=None):
    """PluginManager over the default search paths for ``cwd``."""
    from actionhost.config.paths import get_plugin_search_paths
    from actionhost.plugins.discovery import PluginDiscovery
    from actionhost.plugins.loader import PluginLoader
    from actionhost.plugins.manager import PluginManager

    return PluginManager(
        PluginDiscovery(get_plugin_search_paths(cwd)),
        PluginLoader(translator),
    )


def __getattr__(name):
    if name in ("PluginManifest", "PluginDescriptor"):
        from actionhost.plugins import manifest
        return getattr(manifest, name)
    if name in ("PluginMeta", "PluginDefinition", "define_plugin"):
        from actionhost.plugins import definition
        return getattr(definition, name)
    if name in ("LoadedPlugin", "LoadedPluginMeta", "PluginState"):
        from actionhost.plugins import registry
        return getattr(registry, name)
    if name == "PluginDiscovery":
        from actionhost.plugins.discovery import PluginDiscovery
        return PluginDiscovery
    if name == "PluginLoader":
        from actionhost.plugins.loader import PluginLoader
        return PluginLoader
    if name == "PluginManager":
        from actionhost.plugins.manager import PluginManager
        return PluginManager
    if name == "PluginService":
        from actionhost.plugins.service import PluginService
        return PluginService
    raise AttributeError(f"module 'actionhost.plugins' has no attribute {name!r}")
