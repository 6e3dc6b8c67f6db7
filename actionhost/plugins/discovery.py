"""Plugin discovery - scans directories to find plugin packages."""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from actionhost.constants import PLUGIN_MANIFEST_FILE, PLUGIN_PREFIX
from actionhost.plugins.manifest import PluginDescriptor, PluginManifest

logger = logging.getLogger(__name__)


class PluginDiscovery:
    """Discovers plugins by scanning directories for ``actionhost-plugin-*`` packages.

    Only manifests are read; plugin code is never executed here, so a broken
    plugin cannot break discovery.
    """

    MANIFEST_FILE = PLUGIN_MANIFEST_FILE

    def __init__(self, search_paths: Iterable[Path]):
        """Initialize discovery with search paths.

        Args:
            search_paths: Directories searched in order; the first plugin found
                          with a given name wins.
        """
        self.search_paths = [Path(p) for p in search_paths]

    def discover_all(self) -> List[PluginDescriptor]:
        """Discover all plugins from configured search paths.

        Returns:
            List of discovered plugins
        """
        discovered = []
        seen_names = set()

        for search_path in self.search_paths:
            if not search_path.is_dir():
                logger.debug(f"Plugin search path does not exist: {search_path}")
                continue

            for descriptor in self._scan_directory(search_path):
                if descriptor.name in seen_names:
                    logger.debug(
                        f"Plugin '{descriptor.name}' at {descriptor.path} shadowed "
                        f"by an earlier search path, skipping"
                    )
                    continue
                seen_names.add(descriptor.name)
                discovered.append(descriptor)

        logger.info(f"Discovered {len(discovered)} plugin(s)")
        return discovered

    def discover_single(self, plugin_path: Path) -> Optional[PluginDescriptor]:
        """Discover a single plugin from a specific path.

        Args:
            plugin_path: Path to the plugin directory

        Returns:
            PluginDescriptor if valid, None otherwise
        """
        plugin_path = Path(plugin_path)
        manifest_file = plugin_path / self.MANIFEST_FILE
        if not manifest_file.exists():
            logger.error(f"No {self.MANIFEST_FILE} found at {plugin_path}")
            return None
        return self._load_manifest(manifest_file)

    def _scan_directory(self, search_path: Path) -> List[PluginDescriptor]:
        """Scan a directory for plugin subdirectories.

        Args:
            search_path: Directory to scan

        Returns:
            List of discovered plugins, sorted by directory name
        """
        plugins = []

        try:
            entries = sorted(search_path.iterdir())
        except OSError as e:
            logger.error(f"Failed to scan directory {search_path}: {e}")
            return plugins

        for item in entries:
            if not item.name.startswith(PLUGIN_PREFIX) or not item.is_dir():
                continue
            manifest_file = item / self.MANIFEST_FILE
            if not manifest_file.exists():
                logger.debug(f"Plugin {item.name} has no {self.MANIFEST_FILE}, skipping")
                continue

            descriptor = self._load_manifest(manifest_file)
            if descriptor:
                plugins.append(descriptor)

        return plugins

    def _load_manifest(self, manifest_file: Path) -> Optional[PluginDescriptor]:
        """Load and validate a plugin manifest.

        Args:
            manifest_file: Path to plugin.json

        Returns:
            PluginDescriptor if valid, None otherwise
        """
        try:
            with open(manifest_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            manifest = PluginManifest(**data)
            plugin_dir = manifest_file.parent

            descriptor = PluginDescriptor(
                name=plugin_dir.name,
                path=plugin_dir.resolve(),
                manifest=manifest,
            )
            logger.debug(f"Discovered plugin: {descriptor.name} at {plugin_dir}")
            return descriptor

        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in {manifest_file}: {e}")
        except ValidationError as e:
            logger.warning(f"Invalid manifest in {manifest_file}: {e}")
        except (OSError, TypeError) as e:
            logger.warning(f"Error loading {manifest_file}: {e}")

        return None
