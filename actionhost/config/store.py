"""File-based configuration store for the user and workspace layers."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from actionhost.config.merge import LayeredConfig, merge_configs
from actionhost.config.nested import delete_nested_value, set_nested_value
from actionhost.config.paths import CONFIG_LAYERS, get_config_path
from actionhost.config.schema import DEFAULT_CONFIG, validate_layer
from actionhost.errors import ConfigLoadError, ConfigWriteError

logger = logging.getLogger(__name__)


class FileConfigStore:
    """Loads, merges and edits the layered JSON settings files.

    Priority is workspace > user > defaults. Reads never raise: a missing,
    empty, unreadable or invalid layer is treated as absent. Writes operate on
    the raw file so keys outside the schema are preserved.
    """

    def __init__(
        self,
        cwd: Optional[Path] = None,
        paths: Optional[Dict[str, Path]] = None,
        defaults: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the store.

        Args:
            cwd: Project directory used to locate the workspace layer
            paths: Explicit per-layer file paths (overrides the defaults)
            defaults: Compiled-in defaults (DEFAULT_CONFIG when omitted)
        """
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self._paths = dict(paths or {})
        self.defaults = defaults if defaults is not None else DEFAULT_CONFIG

    def path_for(self, layer: str) -> Path:
        if layer not in CONFIG_LAYERS:
            raise ValueError(f"Unknown config layer: {layer!r}")
        return self._paths.get(layer) or get_config_path(layer, self.cwd)

    # ------------------------------------------------------------------ reads

    def load_layer(self, layer: str) -> Optional[Dict[str, Any]]:
        """Load and validate one layer.

        Returns:
            The keys set in the layer, or None if the layer is absent or broken
        """
        path = self.path_for(layer)
        try:
            raw = self._read_raw(path)
            if raw is None:
                return None
            return validate_layer(raw)
        except (OSError, ValueError, ValidationError) as e:
            error = ConfigLoadError(layer, str(path), e)
            logger.warning(f"{error.message}, ignoring layer: {e}")
            return None

    def load_all(self) -> LayeredConfig:
        return LayeredConfig(
            user=self.load_layer("user"),
            workspace=self.load_layer("workspace"),
        )

    def load_merged(self) -> Dict[str, Any]:
        """Merged configuration (workspace > user > defaults).

        Each call returns a fresh copy; mutating it does not affect the store.
        """
        try:
            return merge_configs(self.load_all(), self.defaults)
        except Exception as e:
            raise ConfigLoadError("merged", "layered-config", e) from e

    def load_raw(self, layer: str) -> Optional[Dict[str, Any]]:
        """Read a layer file without validation (None if absent or unreadable)."""
        path = self.path_for(layer)
        try:
            return self._read_raw(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read config file {path}: {e}")
            return None

    # ----------------------------------------------------------------- writes

    def save(self, layer: str, key: str, value: Any) -> None:
        """Set ``key`` (dot notation) in a layer, keeping every other key.

        Raises:
            ConfigWriteError: If the file cannot be written
        """
        try:
            existing = self._read_raw(self.path_for(layer)) or {}
            updated = set_nested_value(existing, key, value)
            self._write(self.path_for(layer), updated)
        except (OSError, TypeError, ValueError) as e:
            raise ConfigWriteError(layer, key, e) from e
        logger.debug(f"Saved config to {layer} layer: {key}")

    def delete(self, layer: str, key: str) -> None:
        """Remove ``key`` (dot notation) from a layer. No-op if absent.

        Raises:
            ConfigWriteError: If the file cannot be written
        """
        try:
            existing = self._read_raw(self.path_for(layer))
            if existing is None:
                logger.debug(f"No {layer} config file, nothing to delete: {key}")
                return
            updated = delete_nested_value(existing, key)
            if updated == existing:
                logger.debug(f"Key not present in {layer} config: {key}")
                return
            self._write(self.path_for(layer), updated)
        except (OSError, TypeError, ValueError) as e:
            raise ConfigWriteError(layer, key, e) from e
        logger.debug(f"Deleted config key from {layer} layer: {key}")

    def save_layer(self, layer: str, document: Dict[str, Any]) -> None:
        """Replace a whole layer file."""
        try:
            self._write(self.path_for(layer), document)
        except (OSError, TypeError, ValueError) as e:
            raise ConfigWriteError(layer, "entire-config", e) from e
        logger.debug(f"Saved entire config to {layer} layer")

    # ---------------------------------------------------------------- helpers

    @staticmethod
    def _read_raw(path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        if not content.strip():
            logger.debug(f"Config file is empty: {path}")
            return None

        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be an object, got {type(data).__name__}")
        return data

    @staticmethod
    def _write(path: Path, document: Dict[str, Any]) -> None:
        # Serialize first so a bad value leaves the file untouched
        payload = json.dumps(document, indent=2, ensure_ascii=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload + "\n")
